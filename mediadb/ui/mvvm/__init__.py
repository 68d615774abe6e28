"""
MVVM Package - property binding for catalog view models.

Provides:
- BindableProperty: Descriptor for auto-signaling properties.
- BindableBase: QObject with a generic propertyChanged signal.
- BaseViewModel: Surface lifecycle (status, error message, dispose).
"""
from mediadb.ui.mvvm.bindable import BindableProperty, BindableBase
from mediadb.ui.mvvm.viewmodel import (
    BaseViewModel,
    STATUS_IDLE,
    STATUS_LOADING,
    STATUS_READY,
    STATUS_UNAVAILABLE,
)

__all__ = [
    "BindableProperty",
    "BindableBase",
    "BaseViewModel",
    "STATUS_IDLE",
    "STATUS_LOADING",
    "STATUS_READY",
    "STATUS_UNAVAILABLE",
]
