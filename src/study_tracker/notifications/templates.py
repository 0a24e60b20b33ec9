"""HTML email templates.

All interpolated values are HTML-escaped; lesson titles come from
front-matter and may contain arbitrary text.
"""

from __future__ import annotations

from html import escape

from study_tracker.notifications.email import EmailMessage

_LAYOUT = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: {gradient}; padding: 40px 20px; text-align: center; \
border-radius: 10px 10px 0 0;">
    <h1 style="color: {heading_color}; margin: 0; font-size: 28px;">{heading}</h1>
  </div>
  <div style="background: white; padding: 30px; border-radius: 0 0 10px 10px; \
box-shadow: 0 4px 6px rgba(0,0,0,0.1);">
    {body}
    <div style="text-align: center; margin: 30px 0;">
      <a href="{app_url}" style="background: {accent}; color: white; \
padding: 15px 30px; text-decoration: none; border-radius: 8px; font-weight: bold; \
display: inline-block;">{cta}</a>
    </div>
  </div>
</div>
"""


def _render(
    *,
    heading: str,
    body: str,
    cta: str,
    app_url: str,
    gradient: str,
    accent: str,
    heading_color: str = "white",
) -> str:
    return _LAYOUT.format(
        heading=heading,
        body=body,
        cta=cta,
        app_url=escape(app_url, quote=True),
        gradient=gradient,
        accent=accent,
        heading_color=heading_color,
    )


def lesson_completed(lesson_title: str, streak: int, app_url: str) -> EmailMessage:
    body = f"""\
<h2 style="color: #333; margin: 0 0 20px 0;">Great work on completing:</h2>
    <div style="background: #f8f9fa; padding: 20px; border-radius: 8px; \
margin: 20px 0;">
      <h3 style="color: #667eea; margin: 0; font-size: 20px;">\
{escape(lesson_title)}</h3>
    </div>
    <div style="text-align: center; margin: 30px 0;">
      <span style="background: #10b981; color: white; padding: 15px 25px; \
border-radius: 25px; font-weight: bold;">🔥 {streak} Day Streak!</span>
    </div>
    <p style="color: #666; line-height: 1.6;">You're building incredible momentum! \
Keep the streak alive - your future self will thank you! 💪</p>"""
    return EmailMessage(
        subject=f"🎉 Lesson Complete: {lesson_title}",
        html=_render(
            heading="🎉 Lesson Completed!",
            body=body,
            cta="Continue Learning →",
            app_url=app_url,
            gradient="linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
            accent="#667eea",
        ),
    )


def streak_reminder(streak: int, app_url: str, name: str = "Champion") -> EmailMessage:
    body = f"""\
<h2 style="color: #333; margin: 0 0 20px 0;">Hey {escape(name)}!</h2>
    <div style="text-align: center; margin: 30px 0;">
      <div style="font-size: 36px; font-weight: bold; color: #f5576c;">\
{streak} DAYS</div>
      <p style="color: #666; font-size: 18px; margin: 0;">Current Streak</p>
    </div>
    <p style="color: #666; line-height: 1.6; text-align: center; font-size: 18px;">\
Don't let this {streak}-day streak slip away. Just one lesson today keeps the \
momentum going!</p>"""
    return EmailMessage(
        subject=f"🔥 Don't break your {streak}-day streak!",
        html=_render(
            heading="🔥 Streak Alert!",
            body=body,
            cta="Keep the Streak Alive! →",
            app_url=app_url,
            gradient="linear-gradient(135deg, #f093fb 0%, #f5576c 100%)",
            accent="#f5576c",
        ),
    )


def weekly_progress(
    completed_lessons: int,
    total_hours: float,
    streak: int,
    app_url: str,
) -> EmailMessage:
    def _stat(value: str, label: str, color: str, background: str) -> str:
        return (
            f'<td style="text-align: center; padding: 20px; background: {background}; '
            f'border-radius: 10px;"><div style="font-size: 32px; font-weight: bold; '
            f'color: {color};">{value}</div>'
            f'<div style="color: #666; font-size: 14px;">{label}</div></td>'
        )

    hours = f"{total_hours:g}h"
    body = f"""\
<h2 style="color: #333; margin: 0 0 30px 0; text-align: center;">\
Amazing progress this week!</h2>
    <table style="width: 100%; border-spacing: 20px 0;"><tr>
      {_stat(str(completed_lessons), "Lessons Completed", "#0ea5e9", "#f0f9ff")}
      {_stat(hours, "Study Time", "#10b981", "#f0fdf4")}
      {_stat(str(streak), "Day Streak", "#ea580c", "#fff7ed")}
    </tr></table>"""
    return EmailMessage(
        subject="📊 Your Weekly FAANG Prep Progress",
        html=_render(
            heading="📊 Weekly Progress Report",
            body=body,
            cta="Continue Your Journey →",
            app_url=app_url,
            gradient="linear-gradient(135deg, #4facfe 0%, #00f2fe 100%)",
            accent="#4facfe",
        ),
    )


def congratulations(achievement: str, message: str, app_url: str) -> EmailMessage:
    body = f"""\
<div style="text-align: center; margin: 30px 0;">
      <div style="font-size: 64px;">🏆</div>
      <h2 style="color: #fcb69f; font-size: 24px;">{escape(achievement)}</h2>
    </div>
    <div style="background: #fff9e6; border-left: 4px solid #fcb69f; padding: 20px;">
      <p style="color: #8b4513; margin: 0; line-height: 1.6;">{escape(message)}</p>
    </div>"""
    return EmailMessage(
        subject=f"🏆 Achievement Unlocked: {achievement}",
        html=_render(
            heading="🏆 Achievement Unlocked!",
            body=body,
            cta="Celebrate & Continue! →",
            app_url=app_url,
            gradient="linear-gradient(135deg, #ffecd2 0%, #fcb69f 100%)",
            accent="#fcb69f",
            heading_color="#8b4513",
        ),
    )
