import streamlit as st

from api_client import alert_html, fetch_blog, fetch_chat

st.set_page_config(page_title="💼 정책자금 AI 비서", layout="wide")
st.title("💼 정책자금 AI 비서 (베타)")

# CSS (가로형 알럿)
st.markdown("""
<style>
.alert-inline{
  display:flex; align-items:center; gap:10px;
  padding:10px 12px; border-radius:8px;
  background:#fff2f2; border:1px solid #ffd9d9;
  color:#b00020; font-size:14px;
}
.alert-inline .icon{font-size:16px; line-height:1;}
</style>
""", unsafe_allow_html=True)

# 세션 초기화
if "history" not in st.session_state: st.session_state.history = []
if "blog" not in st.session_state: st.session_state.blog = None
if "last_error" not in st.session_state: st.session_state.last_error = None


def show_error():
    if st.session_state.last_error:
        st.markdown(alert_html(st.session_state["last_error"]), unsafe_allow_html=True)


tab_chat, tab_blog = st.tabs(["상담 채팅", "블로그 글 작성"])

with tab_chat:
    for q, a in st.session_state.history:
        with st.chat_message("user"): st.write(q)
        with st.chat_message("assistant"): st.markdown(a)

    question = st.chat_input("정책자금에 대해 물어보세요")
    if question:
        try:
            data = fetch_chat(question)
            st.session_state.history.append((question, data.get("reply", "")))
            st.session_state.last_error = None
        except Exception as e:
            st.session_state.last_error = str(e)
        st.rerun()
    show_error()

with tab_blog:
    topic = st.text_input("주제 (필수)", placeholder="예: 소상공인 정책자금 신청 방법")
    c1, c2 = st.columns(2)
    with c1:
        title = st.text_input("제목 (비우면 추천 제목 제안)")
        keywords = st.text_input("키워드 (쉼표 구분)")
    with c2:
        audience = st.text_input("대상", value="소상공인/자영업자")
        tone = st.text_input("톤", value="친근하고 전문가 느낌")

    if st.button("글 작성하기", type="primary"):
        try:
            st.session_state.blog = fetch_blog(topic, title=title, keywords=keywords, audience=audience, tone=tone)
            st.session_state.last_error = None
        except Exception as e:
            st.session_state.last_error = str(e)

    show_error()
    if st.session_state.blog:
        st.subheader("작성 결과")
        st.markdown(st.session_state.blog.get("content", "—"))
        st.caption(f"model: {st.session_state.blog.get('model', '-')}")
