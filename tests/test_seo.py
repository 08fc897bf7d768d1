from site_audit.checks.seo import analyze_seo, calculate_seo_score

from conftest import BAD_PAGE, GOOD_DESCRIPTION, GOOD_PAGE, GOOD_TITLE, SITE_URL


def page(title="", description=None, h1s=(), images=()):
    head = f"<title>{title}</title>" if title else ""
    if description is not None:
        head += f'<meta name="description" content="{description}">'
    body = "".join(f"<h1>{h}</h1>" for h in h1s)
    for alt in images:
        body += f'<img src="/x.jpg" alt="{alt}">' if alt else '<img src="/x.jpg">'
    return f"<html><head>{head}</head><body>{body}</body></html>"


def test_well_formed_page_scores_100():
    assert len(GOOD_TITLE) == 45
    assert len(GOOD_DESCRIPTION) == 140

    result = analyze_seo(GOOD_PAGE, SITE_URL)

    assert result.score == 100
    assert result.data["title"] == GOOD_TITLE
    assert result.data["h1_tags"] == ["Licensed Local Plumbers"]
    assert result.issues["missing_alt_tags"] == 0
    assert result.issues["total_images"] == 2


def test_link_counts():
    result = analyze_seo(GOOD_PAGE, SITE_URL)
    assert result.data["links"] == {"internal": 1, "external": 1}


def test_score_floors_at_zero():
    """Every penalty firing at once still leaves a score of 0."""
    result = analyze_seo(BAD_PAGE, SITE_URL)

    assert result.score == 0
    assert result.issues["missing_title"]
    assert result.issues["missing_meta_description"]
    assert result.issues["no_h1"]
    assert result.issues["missing_alt_tags"] == 2


def test_title_length_penalties():
    ok_description = GOOD_DESCRIPTION
    short = analyze_seo(page("Too short", ok_description, ["Heading"]))
    long = analyze_seo(page("x" * 61, ok_description, ["Heading"]))

    assert short.issues["title_too_short"]
    assert short.score == 85
    assert long.issues["title_too_long"]
    assert long.score == 85


def test_meta_description_penalties():
    missing = analyze_seo(page(GOOD_TITLE, None, ["Heading"]))
    too_long = analyze_seo(page(GOOD_TITLE, "d" * 161, ["Heading"]))

    # missing also counts as out of range
    assert missing.score == 70
    assert too_long.issues["meta_description_too_long"]
    assert too_long.score == 90


def test_heading_penalties():
    none = analyze_seo(page(GOOD_TITLE, GOOD_DESCRIPTION, []))
    several = analyze_seo(page(GOOD_TITLE, GOOD_DESCRIPTION, ["One", "Two"]))

    assert none.issues["no_h1"] and none.score == 80
    assert several.issues["multiple_h1"] and several.score == 85


def test_alt_text_penalty_is_proportional():
    half = analyze_seo(page(GOOD_TITLE, GOOD_DESCRIPTION, ["H"], ["logo", ""]))
    quarter = analyze_seo(page(GOOD_TITLE, GOOD_DESCRIPTION, ["H"], ["a", "b", "c", ""]))

    assert half.issues["missing_alt_tags"] == 1
    assert half.score == 90
    assert quarter.score == 95


def test_calculate_seo_score_without_images():
    issues = {
        "missing_title": False,
        "title_too_short": False,
        "title_too_long": False,
        "missing_meta_description": False,
        "meta_description_too_short": False,
        "meta_description_too_long": False,
        "no_h1": False,
        "multiple_h1": False,
        "missing_alt_tags": 0,
        "total_images": 0,
    }
    assert calculate_seo_score(issues) == 100
