"""Core schema, storage and elicitation machinery."""
