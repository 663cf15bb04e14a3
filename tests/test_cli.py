from datetime import datetime

import pytest

from zfsrepl.args import get_args
from zfsrepl.commands.versions.entrypoint import get_version_filter
from zfsrepl.common.args import ZFS_BINARY_ENV
from zfsrepl.common.utils import get_local_puller
from zfsrepl.common.versions import FilesystemVersion, VersionType
from zfsrepl.common.zfs import LocalZfsCli


def test_zfs_binary_default(monkeypatch):
    monkeypatch.delenv(ZFS_BINARY_ENV, raising=False)
    assert get_args(['list']).zfs_binary == 'zfs'


def test_zfs_binary_from_environment(monkeypatch):
    monkeypatch.setenv(ZFS_BINARY_ENV, '/usr/local/sbin/zfs')
    assert get_args(['list']).zfs_binary == '/usr/local/sbin/zfs'
    assert get_args(['list', '--zfs-binary', '/sbin/zfs']).zfs_binary == '/sbin/zfs'


def test_local_puller_uses_configured_binary():
    args = get_args(['--zfs-binary', '/opt/zfs', 'list'])
    puller = get_local_puller(args)
    assert isinstance(puller.cli, LocalZfsCli)
    assert puller.cli.zfs_binary == '/opt/zfs'


def test_versions_args():
    args = get_args(['versions', 'tank/data', '--prefix', 'zrepl_', '--type', 'bookmark', '--within', '1w'])
    assert args.subcommand == 'versions'
    assert args.filesystem == 'tank/data'
    assert args.type == VersionType.BOOKMARK

    f = get_version_filter(args)
    recent = FilesystemVersion(VersionType.BOOKMARK, 'zrepl_1', 1, 1, datetime.now())
    assert f.filter(recent)
    assert not f.filter(FilesystemVersion(VersionType.SNAPSHOT, 'zrepl_1', 1, 1, datetime.now()))
    assert not f.filter(FilesystemVersion(VersionType.BOOKMARK, 'zrepl_0', 1, 1, datetime(2000, 1, 1)))


def test_subcommand_required():
    with pytest.raises(SystemExit):
        get_args([])
