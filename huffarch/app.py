# ----------------
# Importations
# ----------------
import os
import tempfile

import pandas as pd
import streamlit as st

from huffarch.archive import MAGIC
from huffarch.codec import archive_name, compress_file, decompress_file, restored_name
from huffarch.errors import FormatError
from huffarch.tree import tree_to_dot

# ------------------------
#   Streamlit App
# ------------------------
st.set_page_config(page_title="Huffman Archiver", layout="centered")
st.title("Huffman Archiver 🗃")


def timings_table(timings: dict) -> pd.DataFrame:
    return pd.DataFrame(list(timings.items()), columns=["Step", "Time (s)"])


def show_compression(root, stats: dict):
    st.subheader("3) Compression Summary")
    col1, col2, col3 = st.columns(3)
    col1.metric("**Original Size**", f"{stats['original_bytes']} bytes")
    col2.metric("**Compressed Size**", f"{stats['compressed_bytes']} bytes")
    space_saved = stats["space_saved_percent"]
    if space_saved is None:
        col3.metric("Space Saved", "N/A")
        st.markdown("*Compression ratio: N/A (empty file)*")
    else:
        col3.metric("Space Saved", f"{space_saved:.2f}%")
        st.markdown(f"*Compression ratio: {stats['compression_ratio']:.4f}*")
    if space_saved is not None and space_saved <= 0:
        st.warning("The archive is not smaller than the input; the data is probably already compressed.")
    st.markdown(f"*Unique symbols: {stats['unique_symbols']}*")
    st.markdown(f"*Padding bits: {stats['pad_count']}*")

    st.divider()
    st.subheader("4) Processing Timings")
    st.table(timings_table({
        "Read File": stats["time_read"],
        "Build Tree": stats["time_tree_build"],
        "Make Codes": stats["time_codes"],
        "Encode & Pack": stats["time_pack"],
        "Write File": stats["time_write"],
        "Total": stats["time_total"],
    }))

    st.divider()
    st.subheader("5) Huffman Tree")
    if root is not None:
        st.graphviz_chart(tree_to_dot(root))
    else:
        st.info("No Huffman tree (empty file).")


def show_decompression(stats: dict):
    st.subheader("3) Decompression Report")
    col1, col2, col3 = st.columns(3)
    col1.metric("Archive size", f"{stats['compressed_size']} bytes")
    col2.metric("Restored file size", f"{stats['restored_size']} bytes")
    col3.metric("Unique symbols", f"{stats['unique_symbols']}")
    st.divider()
    st.subheader("4) Processing Timings")
    st.table(timings_table({
        "Read File": stats["time_read"],
        "Rebuild Tree": stats["time_tree"],
        "Decode": stats["time_decode"],
        "Write File": stats["time_write"],
        "Total": stats["time_total"],
    }))


# ---------------------
#    Instructions
# ---------------------
st.subheader("1) Instructions")
st.markdown("""
*How to use the archiver*

1. Upload a file using the button below.
2. Archives (starting with the `HUFF` signature) default to Decompress.
3. Any other file defaults to Compress.
4. Click *Process File* to start.
5. Download your file after processing.
""")
st.divider()

# -------------------
# File Uploading
# -------------------
st.subheader("2) File Uploader")
uploaded_file = st.file_uploader("Upload a file", type=None)
if uploaded_file:
    data = uploaded_file.read()
    suffix = os.path.splitext(uploaded_file.name)[1]
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        tmp.write(data)
        tmp_path = tmp.name
    st.success(f"Uploaded file: {uploaded_file.name} ({len(data)} bytes)")

    default = 1 if data.startswith(MAGIC) else 0
    action = st.radio("**Choose Action**", ["Compress", "Decompress"], index=default)

    if st.button("Process File"):
        st.divider()
        if action == "Compress":
            out_path = archive_name(tmp_path)
            download_name = archive_name(uploaded_file.name)
        else:
            out_path = restored_name(tmp_path)
            download_name = restored_name(uploaded_file.name)
        try:
            with st.spinner(f"{action}ing file..."):
                if action == "Compress":
                    root, stats = compress_file(tmp_path, out_path)
                    show_compression(root, stats)
                else:
                    show_decompression(decompress_file(tmp_path, out_path))

            with open(out_path, 'rb') as f:
                # ------------------------
                #   File Downloading
                # ------------------------
                st.divider()
                st.subheader("Download Button")
                st.info(f"Download your {action.lower()}ed file here.")
                st.download_button(
                    label=download_name,
                    data=f.read(),
                    file_name=download_name,
                    mime="application/octet-stream"
                )
        except FormatError as e:
            st.error(f"Error: {e}")
        except OSError as e:
            st.error(f"Could not read or write file: {e}")
        finally:
            # cleanup
            for path in (tmp_path, out_path):
                if os.path.exists(path):
                    os.remove(path)
