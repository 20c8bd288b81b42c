"""Configuration constants for the conditions pipeline."""

# Local timezone used to interpret provider timestamps and the daytime window
DEFAULT_TIMEZONE = "Europe/London"

# Provider endpoints
STORMGLASS_URL = "https://api.stormglass.io/v2/weather/point"
OPEN_METEO_MARINE_URL = "https://marine-api.open-meteo.com/v1/marine"
OPEN_METEO_WEATHER_URL = "https://api.open-meteo.com/v1/forecast"
WORLDTIDES_URL = "https://www.worldtides.info/api/v3"
WORLDTIDES_REGISTER_URL = "https://www.worldtides.info/register"
OVERPASS_URL = "https://overpass-api.de/api/interpreter"
NOMINATIM_URL = "https://nominatim.openstreetmap.org"

REQUEST_TIMEOUT = 15  # seconds
USER_AGENT = "SeaKayakingConditionsApp/1.0"

# Requested hourly variables per provider
STORMGLASS_PARAMS = [
    "waterTemperature", "waveHeight", "wavePeriod", "waveDirection",
    "swellHeight", "swellPeriod", "swellDirection",
    "currentSpeed", "currentDirection",
    "airTemperature", "windSpeed", "gust", "windDirection",
    "precipitation", "visibility", "cloudCover",
]
OPEN_METEO_MARINE_HOURLY = [
    "wave_height", "wave_direction", "wave_period",
    "swell_wave_height", "swell_wave_direction", "swell_wave_period",
    "ocean_current_velocity", "ocean_current_direction",
    "sea_surface_temperature",
]
OPEN_METEO_WEATHER_HOURLY = [
    "temperature_2m", "apparent_temperature",
    "windspeed_10m", "windgusts_10m", "winddirection_10m",
    "precipitation_probability", "precipitation",
    "visibility", "weather_code",
]

# Stormglass sub-source fallback order (first present value wins per sample/channel)
SUB_SOURCE_PRIORITY = ["sg", "noaa", "meto", "smhi", "fcoo"]
DEFAULT_SUB_SOURCE = "sg"

# Cache TTLs (seconds)
WEATHER_CACHE_TTL = 60 * 60
MARINE_CACHE_TTL = 60 * 60
TIDE_CACHE_TTL = 6 * 60 * 60
STORMGLASS_CACHE_TTL = 6 * 60 * 60
GEOCODING_CACHE_TTL = 24 * 60 * 60
COASTLINE_CACHE_TTL = 24 * 60 * 60
CACHE_MAX_ENTRIES = 256

# Coordinate rounding for cache keys
CACHE_KEY_PRECISION = 4

# Display precision per canonical channel (decimal places of the day average)
CHANNEL_PRECISION = {
    "wave_height": 2,
    "wave_period": 2,
    "swell_height": 2,
    "swell_period": 2,
    "current_speed": 2,
    "sea_temperature": 1,
    "air_temperature": 1,
    "apparent_temperature": 1,
    "wind_speed": 1,
    "wind_gust": 1,
    "precipitation": 1,
    "precipitation_probability": 1,
    "visibility": 0,
}
DIRECTION_CHANNELS = ["wave_direction", "swell_direction", "current_direction", "wind_direction"]

# Representative day window (local hours, inclusive)
DAYTIME_START_HOUR = 6
DAYTIME_END_HOUR = 20

# Risk look-ahead window (hourly samples)
LOOKAHEAD_HOURS = 6

# Tides
TIDE_STEP_SECONDS = 1800
TIDE_DATUM = "LAT"
SPRING_RANGE_M = 4.0
NEAP_RANGE_M = 3.0
SYNODIC_MONTH_DAYS = 29.5305882
MOON_PHASES = [
    "New Moon", "Waxing Crescent", "First Quarter", "Waxing Gibbous",
    "Full Moon", "Waning Gibbous", "Last Quarter", "Waning Crescent",
]
DEFAULT_STATION_NAME = "Nearest Tide Point"

# Coastline lookup
COASTLINE_SEARCH_RADIUS_M = 50000
EARTH_RADIUS_KM = 6371.0

# Geocoding
GEOCODING_COUNTRY_CODES = "gb"
GEOCODING_LIMIT = 5
GEOCODING_MIN_QUERY_LENGTH = 2

# Unit conversion
MS_TO_KNOTS = 1.94384
MS_TO_MPH = 2.23694
KMH_TO_MS = 1 / 3.6
M_TO_FEET = 3.28084

# Risk scoring
POINTS_PER_CATEGORY = 20
MAX_CATEGORY = 6
WATER_TEMP_REFERENCE_C = 20
WATER_TEMP_POINTS_PER_DEGREE = 2
WATER_TEMP_GREEN_C = 15
WATER_TEMP_AMBER_C = 10
WIND_GREEN_KN = 10
WIND_AMBER_KN = 20
GUST_GREEN_KN = 15
GUST_AMBER_KN = 25
GUST_EXCESS_DIVISOR = 3
WAVE_HEIGHT_POINTS_PER_M = 6
WAVE_HEIGHT_GREEN_M = 1.0
WAVE_HEIGHT_AMBER_M = 1.5
WAVE_PERIOD_GREEN_S = 10
WAVE_PERIOD_AMBER_S = 15
ACTIVITY_SURCHARGE = 20

# Paddler level by maximum comfortable wind (knots)
PADDLER_LEVELS = [
    ("Beginner", 10),
    ("Intermediate", 16),
    ("Advanced", 27),
]
EXPERT_LEVEL = "Expert"

# Wind relative to coastline / tide (degrees)
ONSHORE_MAX_DIFF = 45
OFFSHORE_MIN_DIFF = 135
WIND_AGAINST_TIDE_MIN = 135

# Daylight
DAYLIGHT_DEPRESSION_ANGLE = 6  # civil twilight

# Forecast horizon (days after today)
MAX_FORECAST_DAYS = 6
