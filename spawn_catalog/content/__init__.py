"""Reference content backend: JSON data tables and in-memory item instances."""
