"""userdesk — a small local user directory.

Lists users and adds, edits and deletes them through a form. The list lives
in a local key-value file; on first use, before anything is stored, it is
seeded from a remote demo API.

Usage:
    python -m userdesk list                # Show users
    python -m userdesk add                 # Add a user (prompts for fields)
    python -m userdesk edit 3              # Edit user 3
    python -m userdesk delete 3            # Delete user 3
"""
