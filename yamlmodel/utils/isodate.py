"""
ISO-8601 parsing for the date and time fields. YAML timestamps are a subset
of ISO-8601, with a space allowed between the date and the time.
"""
import re
import time
from datetime import datetime, time as dt_time
from dateutil import tz

ISO_DATE_RE = re.compile(r'^\d{4}-\d{1,2}-\d{1,2}$')
ISO_TIME_RE = re.compile(r'^(\d{1,2}:\d{2})(:(\d{2})(\.\d{1,6})?)?'
                         r'\s*(Z|[+-]\d{1,2}(:?\d{2})?)?$')
ISO_DATETIME_RE = re.compile(r'^(\d{4}-\d{1,2}-\d{1,2}'
                             r'(?:[Tt]|\s+)\d{1,2}:\d{2})'
                             r'(:(\d{2})(\.\d{1,6})?)?'
                             r'\s*(Z|[+-]\d{1,2}(:?\d{2})?)?$')
TZ_RE = re.compile(r'([+-])(\d{1,2}):?(\d{2})?')


class InvalidFormat(Exception):
    pass


class InvalidDate(Exception):
    pass


def parse_iso_date(value):
    if not ISO_DATE_RE.match(value):
        raise InvalidFormat('invalid ISO-8601 date: "{}"'.format(value))
    try:
        return datetime(*time.strptime(value, '%Y-%m-%d')[:3]).date()
    except ValueError:
        raise InvalidDate('invalid date: "{}"'.format(value))


def parse_tz(tzstr):
    if tzstr is None:
        return None
    if tzstr == 'Z':
        return tz.tzutc()
    sign, hours, minutes = TZ_RE.match(tzstr).groups()
    seconds = int(hours) * 60 * 60 + int(minutes or 0) * 60
    if sign == '-':
        seconds = -seconds
    return tz.tzoffset(None, seconds)


def _extra_args(secs, fraction, tzstr):
    # fractions are given in seconds, datetime wants microseconds
    usecs = int(fraction.lstrip('.').ljust(6, '0')) if fraction else 0
    return (int(secs) if secs else 0, usecs, parse_tz(tzstr))


def parse_iso_datetime(value):
    match = ISO_DATETIME_RE.match(value)
    if not match:
        raise InvalidFormat('invalid ISO-8601 date/time: "{}"'.format(value))

    dtstr, _, secs, fraction, tzstr, _ = match.groups()
    dtstr = re.sub(r'(?:[Tt]|\s+)', ' ', dtstr)
    try:
        dt_args = time.strptime(dtstr, '%Y-%m-%d %H:%M')[:5]
        return datetime(*(dt_args + _extra_args(secs, fraction, tzstr)))
    except ValueError:
        raise InvalidDate('invalid date: "{}"'.format(value))


def parse_iso_time(value):
    match = ISO_TIME_RE.match(value)
    if not match:
        raise InvalidFormat('invalid ISO-8601 time: "{}"'.format(value))

    tmstr, _, secs, fraction, tzstr, _ = match.groups()
    try:
        tm_args = time.strptime(tmstr, '%H:%M')[3:5]
        return dt_time(*(tm_args + _extra_args(secs, fraction, tzstr)))
    except ValueError:
        raise InvalidDate('invalid time: "{}"'.format(value))
