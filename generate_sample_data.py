import asyncio
import random
from datetime import datetime, timedelta

from staffpay.core.database import init_database
from staffpay.models.staff import Staff
from staffpay.models.attendance import AttendanceStatus
from staffpay.services.attendance import mark_attendance


async def create_sample_data():
    """Populate database with sample staff and two weeks of attendance"""
    print("🚀 Starting Sample Data Generation...")

    client = await init_database()

    roster = [
        ("STF100", "Vikram Singh", "Driver", "Fleet", 30000),
        ("STF101", "Asha Nair", "Sales Executive", "Sales", 28000),
        ("STF102", "Rahul Verma", "Mechanic", "Garage", 26000),
        ("STF103", "Meera Iyer", "Accountant", "Finance", 35000),
        ("STF104", "Karan Mehta", "Office Manager", "Administration", 40000),
    ]

    staff_members = []
    for i, (employee_id, name, role, department, salary) in enumerate(roster):
        existing = await Staff.find_one(Staff.employee_id == employee_id)
        if existing:
            print(f"⏩ {employee_id} already exists, skipping...")
            staff_members.append(existing)
            continue

        staff = Staff(
            employee_id=employee_id,
            name=name,
            role=role,
            department=department,
            phone=f"+91-9876543{i:03d}",
            join_date=datetime.utcnow() - timedelta(days=random.randint(30, 365)),
            base_salary=salary,
        )
        await staff.insert()
        staff_members.append(staff)
        print(f"✅ Created Staff: {name} ({employee_id})")

    print("📅 Generating Attendance History (14 Days)...")
    for staff in staff_members:
        for d in range(14):
            day = datetime.utcnow() - timedelta(days=d)
            # Skip Sundays
            if day.weekday() == 6:
                continue

            # Randomly skip some days to simulate absence
            if random.random() < 0.1:
                continue

            is_late = random.random() < 0.2
            in_hour, in_minute = (9, random.randint(16, 45)) if is_late else (8, random.randint(45, 59))

            # Mix of half days, regular shifts and overtime
            roll = random.random()
            if roll < 0.1:
                worked = random.randint(180, 269)
            elif roll < 0.3:
                worked = random.randint(541, 660)
            else:
                worked = random.randint(480, 540)

            check_in = day.replace(hour=in_hour, minute=in_minute, second=0, microsecond=0)
            check_out = check_in + timedelta(minutes=worked)

            await mark_attendance(
                staff_id=str(staff.id),
                date=day,
                status=AttendanceStatus.LATE if is_late else AttendanceStatus.PRESENT,
                in_time=check_in.strftime("%H:%M"),
                out_time=check_out.strftime("%H:%M"),
                work_hours=f"{worked // 60}h {worked % 60}m",
            )

    client.close()
    print("✨ Sample Data Generation Complete!")

if __name__ == "__main__":
    asyncio.run(create_sample_data())
