from .todos_cache import TodosRepoCache, new_todo_id

__all__ = ["TodosRepoCache", "new_todo_id"]
