"""Widgets, layout, input events, theming and frame bookkeeping for the terminal UI."""