"""Share notifications service.

Share requests between note owners and their collaborators, the decisions
taken on them, and the realtime fan-out that tells both parties.
"""
