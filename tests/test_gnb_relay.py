from fivegsim.gnb_relay import SessionTable, UETunnelSession, plausible_ue_ipv4


def _ipv4(src_first_octet, version=4, length=20):
    pkt = bytearray(length)
    pkt[0] = (version << 4) | 5
    pkt[12:16] = bytes([src_first_octet, 45, 0, 2])
    pkt[16:20] = bytes([8, 8, 8, 8])
    return bytes(pkt)


def test_plausible_accepts_unicast_ipv4():
    assert plausible_ue_ipv4(_ipv4(10)) is True


def test_plausible_rejects_noise():
    assert plausible_ue_ipv4(_ipv4(10, length=19)) is False
    assert plausible_ue_ipv4(_ipv4(10, version=6)) is False
    assert plausible_ue_ipv4(_ipv4(0)) is False
    assert plausible_ue_ipv4(_ipv4(224)) is False
    assert plausible_ue_ipv4(_ipv4(255)) is False


def test_register_and_len():
    table = SessionTable()
    table.register(UETunnelSession(ran_ue_ngap_id=1, ul_teid=0xDEADBEEF, dl_teid=1))
    table.register(UETunnelSession(ran_ue_ngap_id=2, ul_teid=5, dl_teid=2))
    assert len(table) == 2


def test_register_same_id_replaces():
    table = SessionTable()
    table.register(UETunnelSession(ran_ue_ngap_id=1, dl_teid=1))
    replacement = UETunnelSession(ran_ue_ngap_id=1, dl_teid=7)
    table.register(replacement)
    assert len(table) == 1
    assert table.lookup_by_dl_teid(7) is replacement
    assert table.lookup_by_dl_teid(1) is None


def test_first_uplink_claims_unbound_session():
    table = SessionTable()
    session = UETunnelSession(ran_ue_ngap_id=1, ul_teid=0xDEADBEEF, dl_teid=1)
    table.register(session)
    src = ("127.0.0.1", 40000)
    got = table.resolve_for_uplink(src, "10.45.0.2")
    assert got is session
    assert session.ue_src_addr == src
    assert session.ue_ip == "10.45.0.2"
    assert table.ue_return_address(session) == src


def test_bound_session_matched_by_udp_source():
    table = SessionTable()
    session = UETunnelSession(ran_ue_ngap_id=1, dl_teid=1)
    table.register(session)
    src = ("127.0.0.1", 40000)
    table.resolve_for_uplink(src, "10.45.0.2")
    assert table.resolve_for_uplink(src, "10.45.0.9") is session
    assert session.ue_ip == "10.45.0.2"


def test_matched_session_fills_missing_ue_ip():
    table = SessionTable()
    src = ("127.0.0.1", 40000)
    session = UETunnelSession(ran_ue_ngap_id=1, dl_teid=1, ue_src_addr=src)
    table.register(session)
    assert table.resolve_for_uplink(src, "10.45.0.3") is session
    assert session.ue_ip == "10.45.0.3"


def test_unknown_source_without_free_slot_is_none():
    table = SessionTable()
    table.register(UETunnelSession(ran_ue_ngap_id=1, dl_teid=1))
    table.resolve_for_uplink(("127.0.0.1", 40000), "10.45.0.2")
    assert table.resolve_for_uplink(("127.0.0.1", 40001), "10.45.0.3") is None


def test_two_ues_bind_to_distinct_sessions():
    table = SessionTable()
    table.register(UETunnelSession(ran_ue_ngap_id=1, dl_teid=1))
    table.register(UETunnelSession(ran_ue_ngap_id=2, dl_teid=2))
    a = table.resolve_for_uplink(("127.0.0.1", 40000), "10.45.0.2")
    b = table.resolve_for_uplink(("127.0.0.1", 40001), "10.45.0.3")
    assert a is not b
    assert {a.ran_ue_ngap_id, b.ran_ue_ngap_id} == {1, 2}


def test_lookup_by_dl_teid():
    table = SessionTable()
    session = UETunnelSession(ran_ue_ngap_id=3, dl_teid=0xCAFEBABE)
    table.register(session)
    assert table.lookup_by_dl_teid(0xCAFEBABE) is session
    assert table.lookup_by_dl_teid(0x1234) is None


def test_empty_table_resolves_nothing():
    table = SessionTable()
    assert len(table) == 0
    assert table.resolve_for_uplink(("127.0.0.1", 40000), "10.45.0.2") is None