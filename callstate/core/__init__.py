"""
Core package providing the automata, transition tables and listener.
"""
