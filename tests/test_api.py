from fastapi.testclient import TestClient
from card_sorter.main import app

client = TestClient(app)

PRICES_CSV = b"name,price\nalpha,10\nbeta,2\ngamma,30\n"

CARDS_CSV = (
    "Product Name,Number,Set,Rarity,Condition,Quantity\n"
    "Dark Magician,LOB-005-EN,Legend of Blue Eyes,Ultra Rare,Near Mint,1\n"
    "Blue-Eyes White Dragon,LOB-001-EN,Legend of Blue Eyes,Ultra Rare,Lightly Played,\n"
    "Mystical Elf,MRD-002-EN,Metal Raiders,Common,Near Mint,3\n"
    "Orders Contained in Pull Sheet: 12,,,,,\n"
).encode("utf-8")


def _csv(name, raw):
    return {"file": (name, raw, "text/csv")}


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_sort_numeric_descending():
    r = client.post("/sort", params=[("sort", "price:desc")], files=_csv("prices.csv", PRICES_CSV))
    assert r.status_code == 200

    data = r.json()
    assert data["variant"] == "generic"
    assert data["columns"] == ["name", "price"]
    assert [row["price"] for row in data["rows"]] == [30, 10, 2]
    assert data["sort"] == [{"column": "price", "direction": "desc"}]
    assert data["downloadable"] is True
    assert data["summary"]["rows"] == 3


def test_sort_without_dynamic_typing_compares_text():
    r = client.post(
        "/sort",
        params=[("sort", "price"), ("dynamic_typing", "false")],
        files=_csv("prices.csv", PRICES_CSV),
    )
    assert r.status_code == 200
    assert [row["price"] for row in r.json()["rows"]] == ["10", "2", "30"]


def test_rejects_non_csv_upload():
    r = client.post("/sort", files={"file": ("data.txt", PRICES_CSV, "text/plain")})
    assert r.status_code == 422
    assert r.json()["detail"] == "Only CSV files are supported"


def test_empty_upload_reports_parse_error():
    r = client.post("/sort", files=_csv("empty.csv", b""))
    assert r.status_code == 422
    assert "no header row" in r.json()["detail"]


def test_too_many_sort_keys():
    params = [("sort", "a"), ("sort", "b"), ("sort", "c"), ("sort", "d")]
    r = client.post("/sort", params=params, files=_csv("prices.csv", PRICES_CSV))
    assert r.status_code == 422
    assert "At most 3 sort keys" in r.json()["detail"]


def test_download_sorted_csv():
    r = client.post(
        "/sort/download",
        params=[("sort", "price:desc")],
        files=_csv("prices.csv", PRICES_CSV),
    )
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert 'filename="sorted-data.csv"' in r.headers["content-disposition"]
    assert r.content == b"name,price\r\ngamma,30\r\nalpha,10\r\nbeta,2\r\n"


def test_download_of_header_only_file_is_not_offered():
    r = client.post("/sort/download", files=_csv("empty.csv", b"name,price\n"))
    assert r.status_code == 204
    assert r.content == b""


def test_pull_sheet_footer_is_dropped():
    raw = b"name,note\nalpha,ok\nbeta,Orders Contained in Pull Sheet - Page 1\n"
    r = client.post("/sort", files=_csv("report.csv", raw))
    assert r.status_code == 200

    data = r.json()
    assert [row["name"] for row in data["rows"]] == ["alpha"]
    assert data["summary"]["filtered_out"] == 1


def test_latin1_upload_is_decoded():
    # Latin-1 character forces the non-UTF-8 path
    raw = "name,city\nPaul,Montréal\n".encode("latin-1")
    r = client.post("/sort", files=_csv("test.csv", raw))
    assert r.status_code == 200
    assert r.json()["rows"][0]["city"] == "Montréal"


def test_cards_preview():
    r = client.post("/cards", files=_csv("inventory.csv", CARDS_CSV))
    assert r.status_code == 200

    data = r.json()
    assert data["variant"] == "cards"
    assert data["columns"] == [
        "numbershort", "number", "product name", "condition", "qty", "rarity", "set", "notes",
    ]
    assert [row["product name"] for row in data["rows"]] == [
        "Blue-Eyes White Dragon",
        "Dark Magician",
        "Mystical Elf",
    ]
    assert data["rows"][0]["numbershort"] == "001-EN"
    assert data["rows"][0]["qty"] == "1"
    assert data["summary"]["filtered_out"] == 1
    assert [k["column"] for k in data["sort"]] == ["set", "rarity", "condition", "product name"]


def test_cards_download():
    r = client.post("/cards/download", files=_csv("inventory.csv", CARDS_CSV))
    assert r.status_code == 200
    assert 'filename="sorted_cards.csv"' in r.headers["content-disposition"]

    lines = r.content.decode("utf-8").split("\r\n")
    assert lines[0] == "numbershort,number,product name,condition,qty,rarity,set,notes"
    assert lines[1] == "001-EN,LOB-001-EN,Blue-Eyes White Dragon,Lightly Played,1,Ultra Rare,Legend of Blue Eyes,"
    assert len([line for line in lines if line]) == 4


def test_very_long_number_is_kept_as_text():
    huge = "1" * 5000
    raw = f"id,name\n{huge},alpha\n2,beta\n".encode("ascii")
    r = client.post("/sort", params=[("sort", "id")], files=_csv("ids.csv", raw))
    assert r.status_code == 200
    # mixed number/text cells fall back to text order
    assert [row["id"] for row in r.json()["rows"]] == [huge, 2]


def test_text_sort_ignores_case():
    raw = b"name\nBanana\napple\ncherry\n"
    r = client.post("/sort", params=[("sort", "name")], files=_csv("fruit.csv", raw))
    assert r.status_code == 200
    assert [row["name"] for row in r.json()["rows"]] == ["apple", "Banana", "cherry"]
