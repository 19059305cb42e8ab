# masjid_console/utils/constants.py

class Prayers:
    """
    Prayer names the iqamaah editor knows about, in display order.
    Jumuah is the only prayer that can carry several slots per day.
    """
    FAJR = 'fajr'
    DHUHR = 'dhuhr'
    ASR = 'asr'
    ISHA = 'isha'
    JUMUAH = 'jumuah'

    ALL = (FAJR, DHUHR, ASR, ISHA, JUMUAH)


class CommandKinds:
    RELOAD = 'reload'
    ANNOUNCE = 'announce'

    ALL = (RELOAD, ANNOUNCE)


# Realtime channel event names
BROADCAST_EVENT = 'command:broadcast'
ACK_EVENT = 'client:ack'

# Masjid config stores several announcements in a single text column
ANNOUNCEMENT_DELIM = '|||'
