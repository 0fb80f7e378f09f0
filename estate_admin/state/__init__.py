from .store import Action, AppState, Store, parse_action

__all__ = ["Action", "AppState", "Store", "parse_action"]
