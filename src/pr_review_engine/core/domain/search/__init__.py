from pr_review_engine.core.domain.search.dependency_node import DependencyNode

__all__ = ["DependencyNode"]
