"""Science Sources - contact submissions with email confirmation and moderation.

Visitors submit themselves as sources, confirm their email address, and are
listed once an operator publishes them.
"""

__version__ = "0.1.0"
