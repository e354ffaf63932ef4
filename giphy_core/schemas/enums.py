from __future__ import annotations

from enum import Enum


class RequestType(str, Enum):
    SEARCH = "search"
    TRENDING = "trending"
    TRANSLATE = "translate"
    RANDOM = "random"
    GET = "get"
    GET_ALL = "get_all"
    TERM_SUGGESTIONS = "term_suggestions"
    CATEGORIES = "categories"
    SUB_CATEGORIES = "sub_categories"
    CATEGORY_CONTENT = "category_content"


class HTTPMethod(str, Enum):
    # Only GET today; mutating verbs get added here.
    GET = "GET"


class MediaType(str, Enum):
    GIF = "gif"
    STICKER = "sticker"

    @property
    def path_segment(self) -> str:
        return f"{self.value}s"


class RatingType(str, Enum):
    RATED_Y = "y"
    RATED_G = "g"
    RATED_PG = "pg"
    RATED_PG13 = "pg-13"
    RATED_R = "r"
    UNRATED = "unrated"
    NSFW = "nsfw"


class LanguageType(str, Enum):
    ENGLISH = "en"
    SPANISH = "es"
    PORTUGUESE = "pt"
    INDONESIAN = "id"
    FRENCH = "fr"
    ARABIC = "ar"
    TURKISH = "tr"
    THAI = "th"
    VIETNAMESE = "vi"
    GERMAN = "de"
    ITALIAN = "it"
    JAPANESE = "ja"
    CHINESE_SIMPLIFIED = "zh-CN"
    CHINESE_TRADITIONAL = "zh-TW"
    RUSSIAN = "ru"
    KOREAN = "ko"
    POLISH = "pl"
    DUTCH = "nl"
    ROMANIAN = "ro"
    HUNGARIAN = "hu"
    SWEDISH = "sv"
    CZECH = "cs"
    HINDI = "hi"
    BENGALI = "bn"
    DANISH = "da"
    FARSI = "fa"
    FILIPINO = "tl"
    FINNISH = "fi"
    HEBREW = "iw"
    MALAY = "ms"
    NORWEGIAN = "no"
    UKRAINIAN = "uk"


class RenditionType(str, Enum):
    ORIGINAL = "original"
    ORIGINAL_STILL = "original_still"
    PREVIEW = "preview"
    PREVIEW_GIF = "preview_gif"
    FIXED_HEIGHT = "fixed_height"
    FIXED_HEIGHT_STILL = "fixed_height_still"
    FIXED_HEIGHT_SMALL = "fixed_height_small"
    FIXED_HEIGHT_SMALL_STILL = "fixed_height_small_still"
    FIXED_HEIGHT_DOWNSAMPLED = "fixed_height_downsampled"
    FIXED_WIDTH = "fixed_width"
    FIXED_WIDTH_STILL = "fixed_width_still"
    FIXED_WIDTH_SMALL = "fixed_width_small"
    FIXED_WIDTH_SMALL_STILL = "fixed_width_small_still"
    FIXED_WIDTH_DOWNSAMPLED = "fixed_width_downsampled"
    DOWNSIZED = "downsized"
    DOWNSIZED_STILL = "downsized_still"
    DOWNSIZED_LARGE = "downsized_large"
    DOWNSIZED_MEDIUM = "downsized_medium"
    DOWNSIZED_SMALL = "downsized_small"
    LOOPING = "looping"
