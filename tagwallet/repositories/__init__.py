"""
Persistence adapters.

Services depend on SQLRepository instead of opening sessions themselves, so
tests can point the whole stack at a throwaway SQLite file.
"""
