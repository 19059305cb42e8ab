# masjid_console/schemas.py

from marshmallow import INCLUDE, Schema, fields, validate

from .utils.constants import CommandKinds, Prayers

def _prayer_field():
    return fields.Str(required=True, validate=validate.OneOf(Prayers.ALL))


class MessageSchema(Schema):
    message = fields.Str(required=True)

class MonthQuerySchema(Schema):
    """Query parameters for loading one month; defaults to the current month."""
    year = fields.Int(validate=validate.Range(min=1900, max=9999))
    month = fields.Int(validate=validate.Range(min=1, max=12))

class TimeRangeSchema(Schema):
    startDate = fields.Str(required=True)
    endDate = fields.Str(required=True)
    time = fields.Str(required=True)
    slotIndex = fields.Int()

class PrayerRangesSchema(Schema):
    fajr = fields.List(fields.Nested(TimeRangeSchema), required=True)
    dhuhr = fields.List(fields.Nested(TimeRangeSchema), required=True)
    asr = fields.List(fields.Nested(TimeRangeSchema), required=True)
    isha = fields.List(fields.Nested(TimeRangeSchema), required=True)
    jumuah = fields.List(fields.Nested(TimeRangeSchema), required=True)

class MonthBoundsSchema(Schema):
    start = fields.Str(required=True)
    end = fields.Str(required=True)
    daysInMonth = fields.Int(required=True)
    monthLabel = fields.Str(required=True)

class MonthRefSchema(Schema):
    year = fields.Int(required=True)
    month = fields.Int(required=True)

class IqamaahMonthSchema(Schema):
    year = fields.Int(required=True)
    month = fields.Int(required=True)
    hasData = fields.Bool(required=True)
    bounds = fields.Nested(MonthBoundsSchema, required=True)
    ranges = fields.Nested(PrayerRangesSchema, required=True)
    prev = fields.Nested(MonthRefSchema, required=True)
    next = fields.Nested(MonthRefSchema, required=True)

# Range payloads are validated by the range engine itself so that the
# user sees its messages; these schemas only check types.
class RangeCreateSchema(Schema):
    prayer = _prayer_field()
    startDate = fields.Str(load_default=None, allow_none=True)
    endDate = fields.Str(load_default=None, allow_none=True)
    time = fields.Str(load_default=None, allow_none=True)

class RangeKeySchema(Schema):
    startDate = fields.Str(load_default=None, allow_none=True)
    endDate = fields.Str(load_default=None, allow_none=True)
    time = fields.Str(load_default=None, allow_none=True)

class RangeUpdateSchema(Schema):
    prayer = _prayer_field()
    original = fields.Nested(RangeKeySchema, load_default=None)
    edited = fields.Nested(RangeKeySchema, required=True)

class RangeDeleteSchema(RangeKeySchema):
    prayer = _prayer_field()

class RangeMutationResultSchema(MessageSchema):
    result = fields.Raw(allow_none=True)

class ReloadCommandSchema(Schema):
    reason = fields.Str(required=True, validate=validate.Length(min=1))
    timeout = fields.Float(validate=validate.Range(min=0, max=120))

class AnnounceCommandSchema(Schema):
    text = fields.Str(required=True, validate=validate.Length(min=1))
    timeout = fields.Float(validate=validate.Range(min=0, max=120))

class BroadcastResultSchema(Schema):
    kind = fields.Str(required=True, validate=validate.OneOf(CommandKinds.ALL))
    success = fields.Bool(required=True)
    timedOut = fields.Bool(required=True)
    count = fields.Int(required=True)
    responses = fields.List(fields.Raw(), required=True)
    message = fields.Str(required=True)
    level = fields.Str(required=True)

class MasjidConfigSchema(Schema):
    """Masjid metadata shown on the displays. Unknown keys pass through to the backend."""
    class Meta:
        unknown = INCLUDE

    name = fields.Str()
    address = fields.Str()
    announcements = fields.List(fields.Str())
