from cliphistory.models.clip_record import (
	ClipRecord,
	ClipRecordBuilder,
	content_identity,
	is_blank,
	now_millis,
)

__all__ = [
	'ClipRecord',
	'ClipRecordBuilder',
	'content_identity',
	'is_blank',
	'now_millis',
]
