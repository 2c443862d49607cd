"""chatrelay - stateful chat proxy in front of an upstream LLM completion service."""

__app_name__ = "chatrelay"
__version__ = "0.1.0"
