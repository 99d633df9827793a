import pytest

from src.narrative.metrics import MetricSet, extract_metrics, merge_metrics


def test_percentage_and_count_from_one_sentence():
    metrics = extract_metrics("Reduced failures by 40% for 5,000+ users")
    assert metrics.percentages == ("40%",)
    assert metrics.counts == ("5,000+ users",)
    assert metrics.currency == ()
    assert metrics.multipliers == ()


def test_empty_text_yields_nothing():
    metrics = extract_metrics("")
    assert metrics == MetricSet()
    assert metrics.is_empty()
    assert metrics.all == ()


@pytest.mark.parametrize("value", [None, 42, "   ", "no numbers here"])
def test_odd_input_never_raises(value):
    assert extract_metrics(value).is_empty()


def test_currency_with_scale_and_cents():
    metrics = extract_metrics("Saved $1.2M in licences and $3,500.50 in travel, plus $40K")
    assert metrics.currency == ("$1.2M", "$3,500.50", "$40K")


def test_multiplier_with_qualifier():
    metrics = extract_metrics("Builds are now 3x faster and search is 2.5x better")
    assert metrics.multipliers == ("3x faster", "2.5x better")


def test_count_nouns_are_case_insensitive_and_singular():
    metrics = extract_metrics("Onboarded 12 Engineers and 1 client")
    assert metrics.counts == ("12 Engineers", "1 client")


def test_timeframes_prefer_quarter_with_year():
    metrics = extract_metrics("Shipped in Q3 2024 within 6 weeks, a first-ever launch")
    assert metrics.timeframes == ("Q3 2024", "within 6 weeks", "first-ever")


def test_timeframes_are_not_headline_metrics():
    metrics = extract_metrics("Cut costs 15% in 2 months")
    assert metrics.headline == ("15%",)
    assert metrics.all == ("15%", "in 2 months")


def test_duplicates_keep_first_seen_order():
    metrics = extract_metrics("12% then 30% then 12% again")
    assert metrics.percentages == ("12%", "30%")


def test_merge_metrics_dedupes_across_groups():
    assert merge_metrics([("40%", "$1M"), ("$1M", "3x faster")]) == ("40%", "$1M", "3x faster")
