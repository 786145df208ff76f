"""
The MODEL layer contains pure data structures and layout logic.
It has NO knowledge of the GUI (Qt) or of pointer events.
It deals with the board snapshot, its invariants and drop resolution.
"""
