"""Front-end adapters that host the modal REPL in a terminal toolkit."""
