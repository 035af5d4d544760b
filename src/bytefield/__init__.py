"""Visualize any byte or character stream as an animated field of 3D instances."""
