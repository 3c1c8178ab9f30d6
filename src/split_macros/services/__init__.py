from split_macros.services.macro_query import MacroPathResult, MacroQueryService, SubjectFilter

__all__ = ["MacroPathResult", "MacroQueryService", "SubjectFilter"]
