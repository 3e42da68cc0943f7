"""Tests for embedded picture and OLE object references."""

from __future__ import annotations

from docx_body_events.models import EventKind
from tests.conftest import make_body, texts, translate

RELS = {
    "rId4": "media/image1.png",
    "rId7": "media/image2.jpeg",
    "rId8": "embeddings/oleObject1.bin",
}


def _drawing(blip: str = '<a:blip r:embed="rId4"/>', descr: str = "A chart") -> str:
    return (
        "<w:drawing><wp:inline>"
        '<wp:docPr id="1" name="Picture 1"/>'
        '<a:graphic><a:graphicData uri="http://schemas.openxmlformats.org/drawingml/2006/picture">'
        "<pic:pic><pic:nvPicPr>"
        f'<pic:cNvPr id="0" name="image1.png" descr="{descr}"/><pic:cNvPicPr/>'
        f"</pic:nvPicPr><pic:blipFill>{blip}</pic:blipFill></pic:pic>"
        "</a:graphicData></a:graphic></wp:inline></w:drawing>"
    )


class TestDrawingPictures:
    def test_inline_picture(self) -> None:
        sink = translate(make_body(f"<w:p><w:r>{_drawing()}</w:r></w:p>"), RELS)
        assert sink.kinds() == [
            EventKind.START_PARAGRAPH,
            EventKind.EMBEDDED_PIC_REF,
            EventKind.RUN,
            EventKind.END_PARAGRAPH,
        ]
        assert sink.of_kind(EventKind.EMBEDDED_PIC_REF)[0].data == {
            "file_name": "media/image1.png",
            "description": "A chart",
        }
        assert texts(sink) == [""]

    def test_unknown_relationship_gives_no_file_name(self) -> None:
        drawing = _drawing(blip='<a:blip r:embed="rId99"/>')
        xml = make_body(f"<w:p><w:r>{drawing}</w:r></w:p>")
        pic = translate(xml, RELS).of_kind(EventKind.EMBEDDED_PIC_REF)[0].data
        assert pic["file_name"] is None
        assert pic["description"] == "A chart"

    def test_picture_state_cleared_between_pictures(self) -> None:
        xml = make_body(
            f"<w:p><w:r>{_drawing()}</w:r><w:r>{_drawing(blip='', descr='second')}</w:r></w:p>"
        )
        first, second = translate(xml, RELS).of_kind(EventKind.EMBEDDED_PIC_REF)
        assert first.data["file_name"] == "media/image1.png"
        assert second.data == {"file_name": None, "description": "second"}


class TestVmlPictures:
    def test_imagedata_with_title(self) -> None:
        xml = make_body(
            "<w:p><w:r><w:pict><v:shape>"
            '<v:imagedata r:id="rId7" o:title="Logo"/>'
            "</v:shape></w:pict></w:r></w:p>"
        )
        pic = translate(xml, RELS).of_kind(EventKind.EMBEDDED_PIC_REF)
        assert len(pic) == 1
        assert pic[0].data == {"file_name": "media/image2.jpeg", "description": "Logo"}

    def test_pict_without_image_still_reported(self) -> None:
        xml = make_body("<w:p><w:r><w:pict><v:rect/></w:pict></w:r></w:p>")
        pic = translate(xml, RELS).of_kind(EventKind.EMBEDDED_PIC_REF)
        assert pic[0].data == {"file_name": None, "description": None}


class TestOleObjects:
    def test_embedded_object(self) -> None:
        xml = make_body(
            "<w:p><w:r><w:object>"
            '<o:OLEObject Type="Embed" ProgID="Excel.Sheet.12" '
            'ShapeID="_x0000_i1025" DrawAspect="Content" r:id="rId8"/>'
            "</w:object></w:r></w:p>"
        )
        refs = translate(xml, RELS).of_kind(EventKind.EMBEDDED_OLE_REF)
        assert [r.data for r in refs] == [{"rel_id": "rId8"}]

    def test_attribute_order_does_not_matter(self) -> None:
        xml = make_body(
            '<w:p><w:r><w:object><o:OLEObject r:id="rId8" Type="Embed"/>'
            "</w:object></w:r></w:p>"
        )
        refs = translate(xml, RELS).of_kind(EventKind.EMBEDDED_OLE_REF)
        assert refs[0].data["rel_id"] == "rId8"

    def test_linked_object_is_not_reported(self) -> None:
        xml = make_body(
            '<w:p><w:r><w:object><o:OLEObject Type="Link" r:id="rId8"/>'
            "</w:object></w:r></w:p>"
        )
        assert translate(xml, RELS).of_kind(EventKind.EMBEDDED_OLE_REF) == []

    def test_embedded_object_without_relationship_id(self) -> None:
        xml = make_body(
            '<w:p><w:r><w:object><o:OLEObject Type="Embed"/></w:object></w:r></w:p>'
        )
        refs = translate(xml, RELS).of_kind(EventKind.EMBEDDED_OLE_REF)
        assert refs[0].data == {"rel_id": None}
