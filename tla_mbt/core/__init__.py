"""
Core components: artifacts, caching, checker invocation and exploration.
"""
