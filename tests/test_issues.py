from site_audit.issues import classify
from site_audit.models import Severity

from conftest import healthy_results, make_result, slow


def titles(issues):
    return [issue.title for issue in issues]


def test_healthy_site_has_no_issues():
    report = classify(healthy_results())
    assert report.total == 0


def test_very_slow_site_without_phone():
    """9s mobile load and no phone number are both critical."""
    report = classify(healthy_results(
        performance=slow(9.0),
        conversion=make_result(
            "conversion", 25, data={"phone_visible": False, "contact_form_present": True}
        ),
    ))

    assert titles(report.critical) == ["Extremely Slow Mobile Loading", "Phone Number Not Visible"]
    assert "9.0 seconds" in report.critical[0].description
    assert all(issue.severity is Severity.CRITICAL for issue in report.critical)
    # over 8s is not also reported as merely slow
    assert "Slow Mobile Loading" not in titles(report.high)


def test_slow_band_is_high():
    report = classify(healthy_results(performance=slow(6.34)))

    assert titles(report.high) == ["Slow Mobile Loading"]
    assert "6.3 seconds" in report.high[0].description

    assert classify(healthy_results(performance=slow(8.0))).high[0].title == "Slow Mobile Loading"
    assert classify(healthy_results(performance=slow(5.0))).total == 0


def test_fixed_generation_order():
    report = classify({
        "performance": slow(12.0),
        "mobile": make_result("mobile", 30),
        "seo": make_result(
            "seo", 0,
            issues={"missing_title": True, "missing_meta_description": True, "missing_alt_tags": 3},
        ),
        "local": make_result("local", 10),
        "conversion": make_result(
            "conversion", 0, data={"phone_visible": False, "contact_form_present": False}
        ),
    })

    assert titles(report.critical) == [
        "Extremely Slow Mobile Loading",
        "Phone Number Not Visible",
        "Mobile Website Unusable",
    ]
    assert titles(report.high) == ["Missing SEO Basics", "Poor Local SEO Setup"]
    assert titles(report.medium) == ["No Contact Form", "Missing Image Alt Tags"]
    assert report.medium[1].description.startswith("3 images")


def test_errored_extractors_do_not_trigger_score_rules():
    report = classify(healthy_results(
        performance=make_result("performance", 0, error="timeout"),
        mobile=make_result("mobile", 0, error="boom"),
        local=make_result("local", 0, error="boom"),
    ))
    assert report.total == 0


def test_failed_conversion_counts_as_missing_contact_options():
    report = classify(healthy_results(conversion=make_result("conversion", 0, error="boom")))

    assert titles(report.critical) == ["Phone Number Not Visible"]
    assert titles(report.medium) == ["No Contact Form"]


def test_to_dict_groups_by_tier():
    report = classify(healthy_results(performance=slow(9.0)))
    data = report.to_dict()

    assert set(data) == {"critical", "high", "medium"}
    assert data["critical"][0]["title"] == "Extremely Slow Mobile Loading"
    assert data["critical"][0]["impact"] == "High"
