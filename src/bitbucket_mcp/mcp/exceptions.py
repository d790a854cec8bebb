"""Tool dispatch exception types."""


class ToolError(Exception):
    """Base exception for tool invocation problems detected locally."""

    pass


class UnknownToolError(ToolError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolArgumentError(ToolError):
    """A required tool argument is missing."""

    def __init__(self, tool_name: str, argument: str):
        self.tool_name = tool_name
        self.argument = argument
        super().__init__(f"Missing required argument: {argument}")
