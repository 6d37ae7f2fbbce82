# UI: main window and side panels
