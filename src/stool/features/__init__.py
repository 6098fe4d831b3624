"""Feature commands built on the dispatcher and the interactive selector."""
