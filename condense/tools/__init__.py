from .registry import StaticToolRegistry, ToolRegistry, to_function_schemas

__all__ = ["StaticToolRegistry", "ToolRegistry", "to_function_schemas"]
