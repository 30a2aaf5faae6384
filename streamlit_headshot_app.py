import streamlit as st
import asyncio

from headshot_controller import (
    DOWNLOAD_FILENAME,
    RESULT_MEDIA_TYPE,
    download_payload,
    handle_file_change,
    begin_generate,
    finish_generate,
)
from headshot_state import MODE_LOADING, MODE_RESULT, HeadshotState, PromptChanged, reduce

# Configure Streamlit page
st.set_page_config(
    page_title="Cartoon Headshot Creator",
    page_icon="✨",
    layout="wide"
)

# Custom CSS for the dark purple look
st.markdown("""
<style>
.headshot-title {
    font-size: 3rem;
    font-weight: 800;
    text-align: center;
    background: linear-gradient(90deg, #c084fc, #ec4899);
    -webkit-background-clip: text;
    -webkit-text-fill-color: transparent;
}
.headshot-subtitle {
    text-align: center;
    color: #9ca3af;
    max-width: 42rem;
    margin: 0 auto 2rem auto;
}
.placeholder-text { color: #6b7280; text-align: center; }
.stButton > button { width: 100%; }
</style>
""", unsafe_allow_html=True)

UPLOAD_KEY = "file_upload"
PROMPT_KEY = "prompt_input"
GENERATE_KEY = "generate_button"
ACCEPTED_TYPES = ["png", "jpg", "jpeg", "gif", "webp", "bmp"]


class CartoonHeadshotApp:
    """Streamlit page that keeps one HeadshotState per browser session"""

    def __init__(self):
        if "headshot_state" not in st.session_state:
            st.session_state.headshot_state = HeadshotState()

    @property
    def state(self) -> HeadshotState:
        return st.session_state.headshot_state

    @state.setter
    def state(self, value: HeadshotState):
        st.session_state.headshot_state = value

    def on_file_change(self):
        """Widget callback: decode the picked file into the session state"""
        upload = st.session_state.get(UPLOAD_KEY)
        self.state = asyncio.run(handle_file_change(self.state, upload))

    def on_prompt_change(self):
        self.state = reduce(self.state, PromptChanged(st.session_state.get(PROMPT_KEY, "")))

    def on_generate_click(self):
        """
        Widget callback: switch loading on before the page is drawn.

        The request itself runs later in the same script run, once the
        controls have been drawn disabled.
        """
        # Pick up text typed since the last blur of the text area
        self.on_prompt_change()
        self.state = begin_generate(self.state)

    def run_generation(self):
        with st.spinner("Generating..."):
            self.state = asyncio.run(finish_generate(self.state))

    def render_controls(self):
        """Render upload, prompt and button"""
        state = self.state

        st.markdown("**1. Upload Your Headshot**")
        if state.original_image:
            st.image(state.original_image, caption="Original upload preview", width=160)
        st.file_uploader(
            "Click to upload",
            type=ACCEPTED_TYPES,
            key=UPLOAD_KEY,
            on_change=self.on_file_change,
            help="PNG, JPG, GIF up to 10MB"
        )

        st.text_area(
            "2. Describe Your Style (Optional)",
            key=PROMPT_KEY,
            placeholder="e.g., 'Pixar style', 'add a space background', 'make it pop art'",
            height=100,
            on_change=self.on_prompt_change,
            disabled=state.is_loading
        )

        label = "Generating..." if state.is_loading else "✨ Generate Headshot"
        st.button(
            label,
            key=GENERATE_KEY,
            type="primary",
            disabled=not state.can_generate,
            on_click=self.on_generate_click
        )

    def render_result(self):
        state = self.state
        mode = state.display_mode

        if mode == MODE_LOADING:
            st.info("Generating...")
        elif mode == MODE_RESULT:
            st.image(state.generated_image, caption="Generated cartoon headshot", width="stretch")
            st.download_button(
                label="Download Image",
                data=download_payload(state),
                file_name=DOWNLOAD_FILENAME,
                mime=RESULT_MEDIA_TYPE,
                width="stretch"
            )
        else:
            st.markdown("### ✨ Your cartoon will appear here")
            st.markdown(
                '<p class="placeholder-text">Upload an image and click "Generate" to see the result.</p>',
                unsafe_allow_html=True
            )

    def render_ui(self):
        """Render the main UI"""
        st.markdown('<div class="headshot-title">Cartoon Headshot Creator</div>', unsafe_allow_html=True)
        st.markdown(
            '<p class="headshot-subtitle">Transform your photos into stunning cartoon avatars with AI. '
            'Upload your image, describe your desired style, and let Gemini work its magic.</p>',
            unsafe_allow_html=True
        )

        if self.state.error:
            st.error(f"**Error:** {self.state.error}")

        controls_col, result_col = st.columns(2)

        with controls_col:
            self.render_controls()

        with result_col:
            self.render_result()
            if self.state.is_loading:
                self.run_generation()
                st.rerun()


def main():
    """Main application entry point"""
    app = CartoonHeadshotApp()
    app.render_ui()


if __name__ == "__main__":
    main()
