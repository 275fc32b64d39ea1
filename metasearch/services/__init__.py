from .search_service import SearchService, build_search_service, make_query

__all__ = ["SearchService", "build_search_service", "make_query"]
