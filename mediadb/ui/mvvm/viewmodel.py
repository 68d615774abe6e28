"""
MVVM ViewModel Infrastructure.

Base class for the catalog surfaces (search box, tag browser, media views).
A surface is mounted once, may await backend calls, and is disposed when the
view goes away; results arriving after disposal are ignored.
"""
from PySide6.QtCore import Signal

from mediadb.ui.mvvm.bindable import BindableProperty, BindableBase

# Surface status values
STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_UNAVAILABLE = "unavailable"


class BaseViewModel(BindableBase):
    """
    Base class for ViewModels.

    Example:
        class MyViewModel(BaseViewModel):
            nameChanged = Signal(str)
            name = BindableProperty(default="")
    """

    statusChanged = Signal(str)
    errorMessageChanged = Signal(str)

    status = BindableProperty(default=STATUS_IDLE)
    error_message = BindableProperty(default="", signal_name="errorMessageChanged")

    def __init__(self, locator=None):
        super().__init__(locator)
        self._disposed = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Detach from services. Pending async results become no-ops."""
        self._disposed = True

    def set_error(self, message: str) -> None:
        self.error_message = message

    def clear_error(self) -> None:
        self.error_message = ""
