"""Unit tests for the DoH answer mapper."""

import pytest

from routekit.models.dns_record import DNSRecord
from routekit.utils.record_mapper import (
    format_caa,
    format_mx,
    format_soa,
    map_answer,
    map_answers,
)


def answer(rr_type, data, ttl=300, name="example.com."):
    return {"name": name, "type": rr_type, "TTL": ttl, "data": data}


class TestMapAnswer:
    """Test map_answer() per record type."""

    def test_a_record(self):
        assert map_answer(answer(1, "93.184.216.34"), "A") == DNSRecord(
            type="A", value="93.184.216.34", ttl=300
        )

    def test_aaaa_record(self):
        record = map_answer(answer(28, "2606:2800:220:1:248:1893:25c8:1946"), "AAAA")
        assert record.type == "AAAA"
        assert record.value == "2606:2800:220:1:248:1893:25c8:1946"

    def test_mx_priority_split(self):
        record = map_answer(answer(15, "10 mail.example.com.", ttl=3600), "MX")
        assert record == DNSRecord(type="MX", value="mail.example.com.", ttl=3600, priority=10)

    def test_mx_without_priority_kept_verbatim(self):
        record = map_answer(answer(15, "mail.example.com."), "MX")
        assert record.value == "mail.example.com."
        assert record.priority is None

    def test_txt_string(self):
        record = map_answer(answer(16, "v=spf1 include:_spf.example.com ~all"), "TXT")
        assert record.value == "v=spf1 include:_spf.example.com ~all"

    def test_txt_chunk_list_joined(self):
        record = map_answer(answer(16, ["v=spf1 ", "include:_spf.example.com ", "~all"]), "TXT")
        assert record.value == "v=spf1 include:_spf.example.com ~all"

    def test_txt_requested_lowercase(self):
        assert map_answer(answer(16, "hello"), "txt").value == "hello"

    def test_caa_formatted(self):
        record = map_answer(answer(257, '0 issue "letsencrypt.org"'), "CAA")
        assert record.value == "issue: letsencrypt.org"

    def test_soa_formatted(self):
        data = "ns1.example.com. hostmaster.example.com. 2024010101 7200 3600 1209600 300"
        record = map_answer(answer(6, data), "SOA")
        assert record.value == "ns1.example.com. hostmaster.example.com. (Serial: 2024010101)"

    def test_ns_verbatim(self):
        assert map_answer(answer(2, "ns1.example.com.", ttl=86400), "NS").value == "ns1.example.com."

    def test_cname_verbatim(self):
        record = map_answer(answer(5, "example.com.", name="www.example.com."), "CNAME")
        assert record == DNSRecord(type="CNAME", value="example.com.", ttl=300)

    def test_unknown_type_code(self):
        record = map_answer(answer(999, "unknown data"), "999")
        assert record == DNSRecord(type="TYPE999", value="unknown data", ttl=300)

    def test_type_mismatch_discarded(self):
        assert map_answer(answer(5, "example.net."), "A") is None

    def test_unreadable_type_skipped(self):
        assert map_answer(answer("bogus", "1.2.3.4"), "A") is None

    def test_missing_ttl(self):
        record = map_answer({"name": "example.com.", "type": 1, "data": "1.2.3.4"}, "A")
        assert record.ttl is None

    @pytest.mark.parametrize("ttl", [-1, "300", 1.5, True])
    def test_invalid_ttl_dropped(self, ttl):
        assert map_answer(answer(1, "1.2.3.4", ttl=ttl), "A").ttl is None


class TestMapAnswers:
    """Test map_answers() filtering."""

    def test_cname_chain_filtered_for_a(self):
        answers = [
            answer(5, "edge.example.net.", name="www.example.com."),
            answer(1, "203.0.113.10", name="edge.example.net."),
        ]
        assert map_answers(answers, "A") == [
            DNSRecord(type="A", value="203.0.113.10", ttl=300)
        ]

    def test_only_cname_for_a_yields_nothing(self):
        assert map_answers([answer(5, "example.net.")], "A") == []

    def test_multiple_records_keep_order(self):
        answers = [answer(1, "93.184.216.34"), answer(1, "93.184.216.35")]
        assert [r.value for r in map_answers(answers, "A")] == ["93.184.216.34", "93.184.216.35"]

    def test_non_mapping_entries_skipped(self):
        assert map_answers(["garbage", None, answer(1, "1.2.3.4")], "A") == [
            DNSRecord(type="A", value="1.2.3.4", ttl=300)
        ]


class TestFormatters:
    """Test type-specific payload formatting."""

    def test_format_mx(self):
        assert format_mx("20 alt1.aspmx.l.google.com.") == ("alt1.aspmx.l.google.com.", 20)

    def test_format_mx_verbatim(self):
        assert format_mx("not-a-priority mail.example.com.") == (
            "not-a-priority mail.example.com.",
            None,
        )

    def test_format_caa_no_critical(self):
        assert format_caa('0 issue "letsencrypt.org"') == "issue: letsencrypt.org"

    def test_format_caa_critical(self):
        assert format_caa('128 issue "pki.goog"') == "issue: pki.goog (critical)"

    def test_format_caa_unquoted_value(self):
        assert format_caa("0 issuewild ;") == "issuewild: ;"

    def test_format_caa_value_with_spaces(self):
        assert format_caa('0 iodef "mailto:sec team@example.com"') == (
            "iodef: mailto:sec team@example.com"
        )

    @pytest.mark.parametrize("data", ["0 issue", "x issue letsencrypt.org", ""])
    def test_format_caa_passthrough(self, data):
        assert format_caa(data) == data

    @pytest.mark.parametrize(
        "data",
        [
            "ns1.example.com. hostmaster.example.com. 2024010101",
            "ns1.example.com. hostmaster.example.com. serial 7200 3600 1209600 300",
        ],
    )
    def test_format_soa_passthrough(self, data):
        assert format_soa(data) == data
