"""
ViewModels for the catalog surfaces.
"""
from mediadb.ui.viewmodels.autocomplete import AutocompleteViewModel
from mediadb.ui.viewmodels.search_box import SearchBoxViewModel
from mediadb.ui.viewmodels.tag_browser import TagBrowserViewModel
from mediadb.ui.viewmodels.media_list import MediaListViewModel
from mediadb.ui.viewmodels.media_detail import MediaDetailViewModel

__all__ = [
    "AutocompleteViewModel",
    "SearchBoxViewModel",
    "TagBrowserViewModel",
    "MediaListViewModel",
    "MediaDetailViewModel",
]
