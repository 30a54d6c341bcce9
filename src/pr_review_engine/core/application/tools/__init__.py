from pr_review_engine.core.application.tools.code_search_tool import CodeSearchTool
from pr_review_engine.core.application.tools.tool_calls import (
    DependencyGraphCall,
    ReadFilesCall,
    SearchRepositoryCall,
    SearchWindowCall,
    ToolCall,
    parse_tool_call,
)
from pr_review_engine.core.application.tools.vcs_tool import VcsTool

__all__ = [
    "CodeSearchTool",
    "DependencyGraphCall",
    "ReadFilesCall",
    "SearchRepositoryCall",
    "SearchWindowCall",
    "ToolCall",
    "VcsTool",
    "parse_tool_call",
]
