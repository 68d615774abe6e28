"""
Smoke run: connect to the catalog server and print the tag hierarchy.

    python main.py [config.json]
"""
import asyncio
import sys

from loguru import logger

from mediadb.core.locator import sl
from mediadb.core.logging import setup_logging
from mediadb.catalog.backend import MediaApiClient
from mediadb.catalog.editor import TagEditor
from mediadb.catalog.service import TagCatalogService
from mediadb.ui.navigation.service import HistoryService
from mediadb.ui.viewmodels.tag_browser import TagBrowserViewModel


async def async_main(config_path: str) -> int:
    sl.init(config_path)
    general = sl.config.data.general
    setup_logging(general.debug_mode, general.log_dir)

    sl.register_system(MediaApiClient)
    sl.register_system(TagCatalogService)
    sl.register_system(HistoryService)
    await sl.start_all()

    try:
        catalog = sl.get_system(TagCatalogService)
        browser = TagBrowserViewModel(
            sl,
            catalog,
            TagEditor(catalog, catalog.backend),
            sl.get_system(HistoryService),
            sl.config.data.search,
        )
        await browser.mount()
        if browser.status_text:
            print(browser.status_text)
        for row in browser.rows:
            print(f"{'  ' * row.depth}{row.tag.name}  [{browser.link_for(row.tag)}]")
        browser.dispose()
        return 0 if browser.error_message == "" else 1
    finally:
        await sl.stop_all()
        logger.info("Done")


def main():
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.json"
    sys.exit(asyncio.run(async_main(config_path)))


if __name__ == "__main__":
    main()
