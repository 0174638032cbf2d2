"""Safety warnings shown before a supplement is logged."""

from caloria.domain.supplements import (
    SupplementDosage,
    SupplementType,
    SupplementWarning,
    WarningLevel,
)

CREATINE_MAX_DAILY_G = 5

_FDA_DRUG_CLASS = "https://www.fda.gov/drugs/information-drug-class"

_WARNINGS: dict[SupplementType, tuple[SupplementWarning, ...]] = {
    SupplementType.TESTOSTERONE: (
        SupplementWarning(
            level=WarningLevel.CRITICAL,
            message=(
                "Testosterone is a controlled substance that requires "
                "a prescription."
            ),
            recommendation="Use only under close medical supervision.",
            learn_more_url=f"{_FDA_DRUG_CLASS}/testosterone-information",
        ),
        SupplementWarning(
            level=WarningLevel.DANGER,
            message="Can cause acne, mood changes, heart problems and liver damage.",
            recommendation=(
                "Requires regular monitoring of hormone, liver and heart health."
            ),
        ),
    ),
    SupplementType.ANABOLIC_STEROID: (
        SupplementWarning(
            level=WarningLevel.CRITICAL,
            message=(
                "Anabolic steroids are controlled and highly dangerous substances."
            ),
            recommendation="Never use without a prescription.",
            learn_more_url=(
                "https://www.drugabuse.gov/publications/drugfacts/anabolic-steroids"
            ),
        ),
        SupplementWarning(
            level=WarningLevel.CRITICAL,
            message=(
                "Risks include liver damage, heart problems, infertility "
                "and dependence."
            ),
            recommendation="Talk to an endocrinologist or sports physician first.",
        ),
    ),
    SupplementType.SARM: (
        SupplementWarning(
            level=WarningLevel.DANGER,
            message="SARMs are not approved for human use.",
            recommendation=(
                "They are unregulated and can cause steroid-like side effects."
            ),
            learn_more_url=(
                "https://www.fda.gov/news-events/public-health-focus/"
                "fda-investigating-presence-sarms-dietary-supplements"
            ),
        ),
        SupplementWarning(
            level=WarningLevel.CAUTION,
            message=(
                "May suppress hormones and harm the liver; long-term effects "
                "are unknown."
            ),
            recommendation="Avoid until properly approved and regulated.",
        ),
    ),
    SupplementType.GROWTH_HORMONE: (
        SupplementWarning(
            level=WarningLevel.CRITICAL,
            message=(
                "Human growth hormone is a controlled substance that requires "
                "a prescription."
            ),
            recommendation=(
                "Only for specific medical conditions under supervision."
            ),
            learn_more_url=f"{_FDA_DRUG_CLASS}/human-growth-hormone-hgh",
        ),
        SupplementWarning(
            level=WarningLevel.DANGER,
            message="Can cause acromegaly, diabetes, heart problems and joint pain.",
            recommendation="Needs ongoing monitoring of hormone levels and metabolism.",
        ),
    ),
    SupplementType.CREATINE: (
        SupplementWarning(
            level=WarningLevel.INFO,
            message="Creatine is safe at the recommended dose (3-5 g/day).",
            recommendation="Stay hydrated. It may upset the stomach in some people.",
        ),
    ),
    SupplementType.PRE_WORKOUT: (
        SupplementWarning(
            level=WarningLevel.CAUTION,
            message=(
                "Pre-workouts often contain high doses of caffeine and stimulants."
            ),
            recommendation=(
                "Avoid late in the day and do not combine with other stimulants."
            ),
        ),
    ),
    SupplementType.PROTEIN_POWDER: (
        SupplementWarning(
            level=WarningLevel.INFO,
            message="Protein powder counts toward your daily protein goal.",
            recommendation=(
                "Log it as a supplement so its macros are included in your totals."
            ),
        ),
    ),
}


def supplement_warnings(
    supplement_type: SupplementType | str,
    dosage: SupplementDosage | None = None,
) -> list[SupplementWarning]:
    """Return warnings for a supplement type, most severe first."""
    resolved = SupplementType(supplement_type)
    warnings = list(_WARNINGS.get(resolved, ()))
    if (
        resolved is SupplementType.CREATINE
        and dosage is not None
        and dosage.unit == "g"
        and dosage.amount > CREATINE_MAX_DAILY_G
    ):
        warnings.append(
            SupplementWarning(
                level=WarningLevel.CAUTION,
                message=f"{dosage.amount:g} g is above the usual daily dose.",
                recommendation=(
                    "Doses above 5 g/day are only used in short loading phases."
                ),
            )
        )
    return sorted(warnings, key=lambda item: _SEVERITY[item.level], reverse=True)


def requires_confirmation(warnings: list[SupplementWarning]) -> bool:
    """Return True when any warning is danger or critical."""
    return any(
        _SEVERITY[item.level] >= _SEVERITY[WarningLevel.DANGER] for item in warnings
    )


_SEVERITY = {
    WarningLevel.INFO: 0,
    WarningLevel.CAUTION: 1,
    WarningLevel.DANGER: 2,
    WarningLevel.CRITICAL: 3,
}
