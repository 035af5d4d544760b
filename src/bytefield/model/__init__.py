"""
The MODEL layer contains pure data structures and the arrangement math.
It has NO knowledge of the GUI (Qt) or the Visualization (PyVista).
It deals with Curves, Layouts, Colors and I/O.
"""
