"""applemcp — MCP tools for Apple Contacts, Notes, Messages, Reminders and Calendar."""

__version__ = "0.1.0"
