from .entries import EntryIn, EntryOut, EntryList
from .stakeholders import StakeholderIn, StakeholderOut, StakeholderList
from .tags import TagOut, TagList, CustomTagIn
from .narratives import (
    NarrativeType,
    Tone,
    Provider,
    NarrativeRequest,
    NarrativeMeta,
    NarrativeResponse,
)
from .insights import (
    TagCountOut,
    StakeholderCountOut,
    StatsOut,
    InsightsResponse,
)
