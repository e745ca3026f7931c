"""Two small demo services: a greeting server and a clock server with a WebSocket push."""

__version__ = "0.1.0"
