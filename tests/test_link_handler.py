from __future__ import annotations

import pytest

from linkshade.controllers.link_handler import ActionResolver
from linkshade.core.errors import (
    BrokenTarget,
    InvalidActionKind,
    LaunchNotPermitted,
    MissingFile,
)
from linkshade.core.page.models import LinkAction, LinkType
from linkshade.utils.settings import LinkSettings


def test_goto_dest_navigates_and_flashes(qapp, viewer) -> None:
    resolver = ActionResolver(viewer)
    requested = []
    resolver.navigation_requested.connect(lambda page, top: requested.append((page, top)))

    resolver.execute(LinkAction.goto_dest(5, top=0.25))

    assert viewer.navigated == [5]
    assert viewer.flashed == [0.25]
    assert requested == [(5, 0.25)]


def test_goto_dest_without_flash(qapp, viewer) -> None:
    resolver = ActionResolver(viewer, LinkSettings(flash_on_jump=False))
    resolver.execute(LinkAction.goto_dest(2, top=0.5))
    assert viewer.navigated == [2]
    assert viewer.flashed == []


def test_broken_goto_fails(qapp, viewer) -> None:
    resolver = ActionResolver(viewer)
    with pytest.raises(BrokenTarget):
        resolver.execute(LinkAction.goto_dest(0))
    assert viewer.navigated == []


def test_missing_remote_file_fails(qapp, viewer) -> None:
    resolver = ActionResolver(viewer)
    action = LinkAction.goto_remote("/nonexistent", page=3)

    assert resolver.describe(action) == "Link to nonexistent file '/nonexistent'"
    with pytest.raises(MissingFile):
        resolver.execute(action)
    assert viewer.opened == []


def test_remote_file_opens_and_navigates(qapp, viewer, tmp_path) -> None:
    target = tmp_path / "other.pdf"
    target.write_bytes(b"%PDF-1.7\n")
    remote = type(viewer)()
    viewer.remote_viewer = remote
    resolver = ActionResolver(viewer)

    resolver.execute(LinkAction.goto_remote(str(target), page=7, top=0.1))

    assert viewer.opened == [str(target)]
    assert remote.navigated == [7]
    assert viewer.navigated == []


def test_remote_file_without_page_only_opens(qapp, viewer, tmp_path) -> None:
    target = tmp_path / "other.pdf"
    target.write_bytes(b"%PDF-1.7\n")
    viewer.remote_viewer = type(viewer)()
    resolver = ActionResolver(viewer)

    resolver.execute(LinkAction.goto_remote(str(target)))

    assert viewer.opened == [str(target)]
    assert viewer.remote_viewer.navigated == []


def test_uri_uses_configured_handler(qapp, viewer) -> None:
    opened = []
    resolver = ActionResolver(viewer, LinkSettings(uri_handler=opened.append))
    emitted = []
    resolver.external_link_opened.connect(emitted.append)

    resolver.execute(LinkAction.uri_link("https://example.org"))

    assert opened == ["https://example.org"]
    assert emitted == ["https://example.org"]


def test_launch_is_not_executed_by_default(qapp, viewer) -> None:
    resolver = ActionResolver(viewer)
    with pytest.raises(LaunchNotPermitted):
        resolver.execute(LinkAction.launch("/bin/sh", "-c true"))


def test_unknown_kind_fails(qapp, viewer) -> None:
    resolver = ActionResolver(viewer)
    with pytest.raises(InvalidActionKind):
        resolver.execute(LinkAction(LinkType.UNKNOWN))


def test_perform_reports_failures(qapp, viewer) -> None:
    resolver = ActionResolver(viewer)
    failures = []
    resolver.link_action_failed.connect(failures.append)

    assert resolver.perform(LinkAction.goto_dest(0)) is False
    assert failures == ["Destination not found"]
    assert viewer.messages == ["Destination not found"]

    assert resolver.perform(LinkAction.goto_dest(1)) is True
    assert viewer.navigated == [1]
