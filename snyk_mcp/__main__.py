from .mcp import run_stdio

run_stdio()
