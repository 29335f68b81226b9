"""
High-level use cases for the tagwallet backends.

Each service orchestrates the repository and core helpers to implement a
business rule (register an account, bind a tag, check in). Routers call these
services instead of opening database sessions directly.
"""
