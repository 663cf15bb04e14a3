from prometheus_client import Histogram


ZFS_SNAPSHOT_DURATION = Histogram(
  'zfsrepl_zfs_snapshot_duration_seconds',
  'Duration of zfs snapshot',
  ['filesystem']
)

ZFS_BOOKMARK_DURATION = Histogram(
  'zfsrepl_zfs_bookmark_duration_seconds',
  'Duration of zfs bookmark',
  ['filesystem']
)
