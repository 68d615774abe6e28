"""
UI layer: view models, navigation and the autocomplete state machine.
Rendering is left to the host toolkit.
"""
