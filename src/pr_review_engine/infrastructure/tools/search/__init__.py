from pr_review_engine.infrastructure.tools.search.workspace_search_tool import WorkspaceSearchTool

__all__ = ["WorkspaceSearchTool"]
