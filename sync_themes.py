"""
Sync packaged themes into the file store.

Registers every theme found under the configured themes root, writes changed
files as new draft versions and can activate and publish one theme.
"""
import argparse
import asyncio
from typing import Optional

from themepress.core.container import ApplicationContainer
from themepress.core.logging import configure_logging
from themepress.infrastructure.database.session import init_db
from themepress.modules.publishing import PublishedSnapshot


async def sync_themes(
    activate: Optional[str],
    publish: bool,
    author: Optional[str],
    container: Optional[ApplicationContainer] = None,
) -> Optional[PublishedSnapshot]:
    """Sync every packaged theme; return the snapshot serving ``activate`` if one was published."""
    owned = container is None
    container = container or ApplicationContainer.build()
    configure_logging(container.settings.logging)
    await init_db(container.engine)
    service = container.theme_service()
    snapshot: Optional[PublishedSnapshot] = None
    try:
        results = await service.sync_all(author=author)
        if not results:
            print(f"No themes found under {container.settings.themes_root}")
        for result in results:
            report = result.report
            print(
                f"{report.theme_id}: {report.scanned} scanned, {report.written} written, "
                f"{report.unchanged} unchanged, {len(report.skipped)} skipped"
            )
            if result.published is not None:
                print(f"{report.theme_id}: published snapshot {result.published.snapshot_number} after sync")
                if report.theme_id == activate:
                    snapshot = result.published

        if activate:
            await service.activate_theme(activate)
            print(f"Active theme: {activate}")
            if publish and snapshot is None:
                snapshot = await service.publish(activate, author or container.settings.themes.default_author)
                print(f"Published {activate} as snapshot {snapshot.snapshot_number}")
    finally:
        if owned:
            await container.dispose()
    return snapshot


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--activate", metavar="SLUG", help="theme to mark as active after syncing")
    parser.add_argument("--publish", action="store_true", help="publish the activated theme")
    parser.add_argument("--author", help="author recorded on new versions")
    args = parser.parse_args()
    asyncio.run(sync_themes(args.activate, args.publish, args.author))


if __name__ == "__main__":
    main()
