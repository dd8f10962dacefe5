"""Modal, keyboard-driven terminal front-end for an interactive REPL."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "config",
    "dispatch",
    "keymaps",
    "modes",
    "runtime",
    "state",
    "suggest",
]

__version__ = "0.1.0"
