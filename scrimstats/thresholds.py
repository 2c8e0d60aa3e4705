# scrimstats/thresholds.py

# Match ids look like YYYY-MM-DD-<n>; official games carry extra segments.
MATCH_ID_PARTS_NUMBER = 4
MATCH_DATE_PATTERN = r'^(\d{4}-\d{2}-\d{2})'

WIN_TOKEN = 'Win'
SIDE_NUMBER_DIVISOR = 100
NO_TEAM_SIDE = 0

OUR_TEAM_ID = 0
UNRESOLVED_TEAM_ID = -1
NEUTRAL_TEAM_ID = 0

MS_PER_MINUTE = 60000
MS_PER_SECOND = 1000

PERCENTILE_25 = 0.25
PERCENTILE_75 = 0.75

SCRIM_MAX_MATCHES = 3
SCRIM_MIN_MATCHES = 2

RADAR_METRIC_KEYS = ('kda', 'dpm', 'kp', 'gpm', 'dpg', 'vspm', 'cspm')
RADAR_LABELS = {
    'kda': 'KDA',
    'dpm': 'DPM',
    'kp': 'KP',
    'gpm': 'GPM',
    'dpg': 'Dmg/Gold',
    'vspm': 'VS/m',
    'cspm': 'CS/m',
}
SUPPORT_EXCLUDED_METRIC = 'cspm'

UNKNOWN_CHAMPION = 'UNKNOWN'
