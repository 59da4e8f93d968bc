"""Constants and configuration values for sentimeter."""


class Polarity:
    """Polarity labels shared by every provider."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    FAILED = "failed"
    UNDEFINED = "undefined"

    # Returned for a provider that never wrote into a ResultSet
    NONE = "None"


# A MechanicalTurk slot holding anything else still carries a raw HIT id
FINAL_POLARITIES = frozenset({
    Polarity.NEGATIVE,
    Polarity.NEUTRAL,
    Polarity.POSITIVE,
    Polarity.FAILED,
    Polarity.UNDEFINED,
})


class ProviderNames:
    """Keys providers write under in every ResultSet."""

    ALCHEMY = "Alchemy"
    BITEXT = "Bitext"
    CHATTERBOX = "Chatterbox"
    REPUSTATE = "Repustate"
    SEMANTRIA = "Semantria"
    SKYTTLE = "Skyttle"
    VIRALHEAT = "Viralheat"
    MECHANICAL_TURK = "MechanicalTurk"


class ProviderLimits:
    """Per-provider document and batch ceilings."""

    BITEXT_MAX_CHARS = 8192
    CHATTERBOX_MAX_CHARS = 300
    VIRALHEAT_MAX_CHARS = 360

    REPUSTATE_BATCH_SIZE = 500


class Thresholds:
    """Score cutoffs used to derive polarity. Not interchangeable between providers."""

    CHATTERBOX_NEGATIVE = -0.25  # strictly below
    CHATTERBOX_POSITIVE = 0.25   # strictly above

    REPUSTATE_NEGATIVE = -0.05   # at or below
    REPUSTATE_POSITIVE = 0.05    # at or above

    SKYTTLE_NEUTRAL_PERCENT = 50  # neutral share above this wins outright


class ReportConstants:
    """Column naming for the CSV report."""

    DOCUMENT_ID_COLUMN = "Document ID"
    SOURCE_TEXT_COLUMN = "Source text"

    DEFAULT_SCORE_LABEL = "Sentiment Score"
    SCORE_LABELS = {
        ProviderNames.BITEXT: "Average Sentiment Score",
        ProviderNames.VIRALHEAT: "Probability Score",
    }

    AGREEMENT_LABEL = "Agreement"

    # Shortest line worth treating as a document
    MIN_LINE_LENGTH = 2
    MIN_CUT_BY = 10


class MTurkConstants:
    """Mechanical Turk HIT registration values."""

    TITLE = "Sentiment analysis"
    DESCRIPTION = "Judge the sentiment expressed by the following text."
    KEYWORDS = "sentiment, nlp"
    HIT_LIFETIME_SECONDS = 24 * 60 * 60
    NOTIFICATION_VERSION = "2006-05-05"

    # System qualification types
    APPROVAL_RATE_QUALIFICATION = "000000000000000000L0"
    LOCALE_QUALIFICATION = "00000000000000000071"

    TEMPLATE_FILE = "sentiment_template.xml"
