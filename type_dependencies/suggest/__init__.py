from type_dependencies.suggest.suggester import DllSuggester, DllSuggestion

__all__ = ["DllSuggester", "DllSuggestion"]
