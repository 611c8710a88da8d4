"""Function grapher plugin manifest."""

manifest = {
    "title": "Function Grapher",
    "summary": "Compile expressions of x without eval and sample them into drawable curves with gap detection.",
    "category": "General Utilities",
    "blueprint": "function_grapher",
}

__all__ = ["manifest"]
