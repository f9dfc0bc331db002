"""
Playbooks - Stage Action Tables

Constant playbook content used by the insight ranker:
- Per-transition focus, diagnosis titles and suggested actions
- Channel quality ranges (lead -> opportunity)
- Speed-to-lead and SDR impact figures
- Capture form guidance for high tickets
- Sector rules keyed on a transition status

Playbooks are reference data. They carry no state and are never
modified at run time.
"""

from dataclasses import dataclass
from types import MappingProxyType

from ..core.entities import ConversionStatus, Sector, Transition


@dataclass(frozen=True)
class StagePlaybook:
    """Qualitative guidance for one funnel transition."""
    transition: Transition
    focus: str
    critical_title: str
    warning_title: str
    heuristic: str
    actions: tuple = ()

    @property
    def primary_action(self) -> str:
        return self.actions[0] if self.actions else ""


@dataclass(frozen=True)
class ChannelBenchmark:
    """Typical lead -> opportunity range for a paid channel (%)."""
    label: str
    lead_to_opportunity_min: float
    lead_to_opportunity_max: float
    description: str


@dataclass(frozen=True)
class ImpactFactor:
    """A published uplift figure used in heuristics."""
    label: str
    multiplier: float
    description: str


CHANNEL_BENCHMARKS = MappingProxyType({
    "linkedin": ChannelBenchmark(
        label="LinkedIn Ads",
        lead_to_opportunity_min=20.0,
        lead_to_opportunity_max=35.0,
        description="Highest B2B lead quality"
    ),
    "meta": ChannelBenchmark(
        label="Meta Ads (Facebook/Instagram)",
        lead_to_opportunity_min=8.0,
        lead_to_opportunity_max=15.0,
        description="Needs more nurturing before conversion"
    ),
    "google": ChannelBenchmark(
        label="Google Ads",
        lead_to_opportunity_min=15.0,
        lead_to_opportunity_max=25.0,
        description="Leads with active intent"
    ),
})

SPEED_TO_LEAD = MappingProxyType({
    "under_five_minutes": ImpactFactor(
        label="Response < 5 minutes",
        multiplier=21.0,
        description="Answering in under 5 minutes raises conversion up to 21x"
    ),
    "under_thirty_minutes": ImpactFactor(
        label="Response < 30 minutes",
        multiplier=4.0,
        description="Significant gains remain up to 30 minutes"
    ),
})

SDR_IMPACT = ImpactFactor(
    label="Dedicated SDRs",
    multiplier=1.4,
    description="Using SDRs can raise closing by up to 40%"
)

FORM_TYPE_GUIDANCE = MappingProxyType({
    "native_forms": "Native lead forms qualify poorly for high tickets",
    "landing_page": "Own landing pages qualify better through trust and social proof",
})


def _channel_mix_heuristic() -> str:
    linkedin = CHANNEL_BENCHMARKS["linkedin"]
    meta = CHANNEL_BENCHMARKS["meta"]
    return (
        f"{linkedin.label} tends to convert {linkedin.lead_to_opportunity_min:.0f}-"
        f"{linkedin.lead_to_opportunity_max:.0f}% of leads into opportunities, "
        f"while {meta.label} needs more nurturing "
        f"({meta.lead_to_opportunity_min:.0f}-{meta.lead_to_opportunity_max:.0f}%)."
    )


STAGE_PLAYBOOKS = MappingProxyType({
    Transition.LEAD_QUALIFIED: StagePlaybook(
        transition=Transition.LEAD_QUALIFIED,
        focus="Traffic quality",
        critical_title="Top of funnel is poorly qualified",
        warning_title="Lead quality needs attention",
        heuristic=_channel_mix_heuristic(),
        actions=(
            "Improve the qualification form",
            "Refine the ideal customer profile",
            "Make the landing page clearer",
            "Align the lead magnet with expectations",
        )
    ),
    Transition.QUALIFIED_SALES_QUALIFIED: StagePlaybook(
        transition=Transition.QUALIFIED_SALES_QUALIFIED,
        focus="Speed to lead",
        critical_title="Hand-off bottleneck (SLA)",
        warning_title="Speed to lead may be hurting conversion",
        heuristic="Check how long sales takes to reach new qualified leads.",
        actions=(
            "Run a structured SDR cadence",
            "Cut response time to under 5 minutes",
            "Review outreach scripts",
            "Improve objection handling",
        )
    ),
    Transition.SALES_QUALIFIED_OPPORTUNITY: StagePlaybook(
        transition=Transition.SALES_QUALIFIED_OPPORTUNITY,
        focus="Sales qualification",
        critical_title="Sales qualification is ineffective",
        warning_title="Discovery can improve",
        heuristic="Validate the pre-sales process and the quality of first meetings.",
        actions=(
            "Improve meeting scheduling quality",
            "Raise the meeting show rate",
            "Pre-frame the prospect before the meeting",
            "Send confirmation and materials in advance",
        )
    ),
    Transition.OPPORTUNITY_CONTRACT: StagePlaybook(
        transition=Transition.OPPORTUNITY_CONTRACT,
        focus="Win rate",
        critical_title="Low closing rate",
        warning_title="Win rate can improve",
        heuristic=(
            "Validate pricing against the market, follow-up discipline "
            "and objection handling."
        ),
        actions=(
            "Review the commercial proposal structure",
            "Add cases and social proof",
            "Frame the proposal around ROI",
            "Define clear next steps",
        )
    ),
})


def get_stage_actions(transition: Transition) -> tuple:
    """Suggested actions for a transition."""
    playbook = STAGE_PLAYBOOKS.get(transition)
    return playbook.actions if playbook else ()


@dataclass(frozen=True)
class SectorRule:
    """Action fired when a transition lands in one of the given statuses."""
    id: str
    sectors: frozenset
    transition: Transition
    statuses: frozenset
    title: str
    description: str
    action: str

    def applies(self, sector: Sector, status: ConversionStatus) -> bool:
        return sector in self.sectors and status in self.statuses


B2B_SECTORS = frozenset({Sector.GENERAL_B2B, Sector.SAAS_TECH, Sector.INDUSTRY})
SERVICES_SECTORS = frozenset({Sector.CONSULTING, Sector.LEGAL})
B2C_SECTORS = frozenset({Sector.GENERAL_B2C})
ALL_SECTORS = frozenset(Sector)

_BELOW_AVERAGE = frozenset({ConversionStatus.CRITICAL, ConversionStatus.WARNING})

SECTOR_RULES = (
    SectorRule(
        id="speed_to_lead_critical",
        sectors=ALL_SECTORS,
        transition=Transition.QUALIFIED_SALES_QUALIFIED,
        statuses=frozenset({ConversionStatus.CRITICAL}),
        title="Set a response SLA under 5 minutes",
        description=f"{SPEED_TO_LEAD['under_five_minutes'].description}.",
        action="Route new leads automatically and alert the owner as they arrive"
    ),
    SectorRule(
        id="speed_to_lead_warning",
        sectors=ALL_SECTORS,
        transition=Transition.QUALIFIED_SALES_QUALIFIED,
        statuses=frozenset({ConversionStatus.WARNING}),
        title="Keep first contact under 30 minutes",
        description=f"{SPEED_TO_LEAD['under_thirty_minutes'].description}.",
        action="Track time to first touch per rep and review it weekly"
    ),
    SectorRule(
        id="sdr_cadence",
        sectors=B2B_SECTORS | SERVICES_SECTORS,
        transition=Transition.SALES_QUALIFIED_OPPORTUNITY,
        statuses=_BELOW_AVERAGE,
        title="Put SDRs in front of discovery",
        description=f"{SDR_IMPACT.description}.",
        action="Assign SDRs to qualify and book meetings before the closer steps in"
    ),
    SectorRule(
        id="landing_page_social_proof",
        sectors=SERVICES_SECTORS,
        transition=Transition.LEAD_QUALIFIED,
        statuses=_BELOW_AVERAGE,
        title="Prioritize a landing page with social proof",
        description=(
            f"{FORM_TYPE_GUIDANCE['native_forms']}. "
            f"{FORM_TYPE_GUIDANCE['landing_page']}."
        ),
        action="Build a landing page with cases, testimonials and a qualification filter"
    ),
    SectorRule(
        id="nurturing_flow",
        sectors=B2C_SECTORS,
        transition=Transition.LEAD_QUALIFIED,
        statuses=_BELOW_AVERAGE,
        title="Set up a nurturing flow",
        description=f"{CHANNEL_BENCHMARKS['meta'].label}: {CHANNEL_BENCHMARKS['meta'].description.lower()}.",
        action="Send an email and messaging sequence to every new lead"
    ),
    SectorRule(
        id="messaging_follow_up",
        sectors=B2C_SECTORS,
        transition=Transition.SALES_QUALIFIED_OPPORTUNITY,
        statuses=_BELOW_AVERAGE,
        title="Follow up through messaging tied to the CRM",
        description="Consumer leads go cold fast without a direct follow-up channel.",
        action="Integrate messaging with the CRM and standardize follow-up templates"
    ),
    SectorRule(
        id="closing_process",
        sectors=B2B_SECTORS,
        transition=Transition.OPPORTUNITY_CONTRACT,
        statuses=frozenset({ConversionStatus.CRITICAL}),
        title="Structure the closing process",
        description="Long B2B cycles stall without a mutual action plan.",
        action="Agree next steps and a decision date with every open opportunity"
    ),
)


def rules_for(sector: Sector, transition: Transition, status: ConversionStatus) -> list:
    """Sector rules fired by a transition status, in table order."""
    return [
        rule for rule in SECTOR_RULES
        if rule.transition == transition and rule.applies(sector, status)
    ]
